"""
Tests for API Gateway routes.

Tests endpoints with FastAPI TestClient.
"""

import pytest
from unittest.mock import AsyncMock, patch

from shared.config import settings
from shared.errors import GenerationTimeoutError, UpstreamAIError, UpstreamFetchError
from shared.models.scene import PredictionStatus, Scene, ScenesResult

SCENE = {"text": "Wake up.", "visuals": "Sunrise over a city", "style": "calm", "duration": 20}


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200


def test_request_id_header(client):
    response = client.get("/")
    assert response.headers.get("X-Request-ID")


def test_cors_preflight(client):
    response = client.options(
        "/api/v1/generate-scenes",
        headers={
            "Origin": "https://app.smartreel.test",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, x-client-info, apikey, content-type",
        }
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_health_endpoint_no_auth(client):
    """Test health endpoint (no auth required)."""
    with patch("api_gateway.routes.health.db.health_check", new=AsyncMock(return_value=True)), \
         patch("api_gateway.routes.health.redis_client.health_check", new=AsyncMock(return_value=True)):
        response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["redis"] == "connected"


def test_health_endpoint_degraded(client):
    with patch("api_gateway.routes.health.db.health_check", new=AsyncMock(return_value=True)), \
         patch("api_gateway.routes.health.redis_client.health_check", new=AsyncMock(return_value=False)):
        response = client.get("/api/v1/health")

    assert response.status_code == 503
    assert response.json()["issues"] == ["redis connection failed"]


def test_malformed_json_is_bad_request(client):
    response = client.post(
        "/api/v1/generate-scenes",
        content="{not json",
        headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


# Scrape

def test_scrape_website(client):
    record = {"title": "Acme", "description": "", "content": "", "script": "", "images": [], "url": "https://acme.test"}

    with patch("api_gateway.routes.scrape.extract_content", new=AsyncMock(return_value=record)) as mock_extract:
        response = client.post("/api/v1/scrape-website", json={"url": "https://acme.test", "projectId": "p1"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": record}
    mock_extract.assert_awaited_once_with("https://acme.test", project_id="p1")


def test_scrape_website_invalid_url(client):
    response = client.post("/api/v1/scrape-website", json={"url": "nope"})

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid URL format"
    assert data["code"] == "VALIDATION_ERROR"
    assert data["retryable"] is False
    assert data["request_id"]


def test_scrape_website_fetch_failure(client):
    failure = UpstreamFetchError("Failed to fetch https://acme.test: HTTP 404", status_code=404)

    with patch("api_gateway.routes.scrape.extract_content", new=AsyncMock(side_effect=failure)):
        response = client.post("/api/v1/scrape-website", json={"url": "https://acme.test"})

    assert response.status_code == 502
    assert response.json()["code"] == "UPSTREAM_FETCH_ERROR"
    assert response.json()["retryable"] is True


# Scene planning

def test_generate_scenes_requires_prompt_or_script(client):
    response = client.post("/api/v1/generate-scenes", json={"prompt": "", "script": ""})

    assert response.status_code == 400
    assert response.json()["error"] == "Either prompt or script is required"


def test_generate_scenes(client):
    result = ScenesResult(title="Morning Coffee", scenes=[Scene.model_validate(SCENE)])

    with patch("api_gateway.routes.scenes.plan_scenes", new=AsyncMock(return_value=result)) as mock_plan:
        response = client.post("/api/v1/generate-scenes", json={"prompt": "coffee"})

    assert response.status_code == 200
    assert response.json() == {"title": "Morning Coffee", "scenes": [SCENE]}
    mock_plan.assert_awaited_once_with(prompt="coffee", script=None)


def test_generate_scenes_rate_limited(client):
    failure = UpstreamAIError(
        "OpenAI rate limit exceeded. Please try again in a moment.",
        status_code=429,
        kind=UpstreamAIError.RATE_LIMIT,
        provider="openai"
    )

    with patch("api_gateway.routes.scenes.plan_scenes", new=AsyncMock(side_effect=failure)):
        response = client.post("/api/v1/generate-scenes", json={"prompt": "coffee"})

    assert response.status_code == 429
    assert response.json()["code"] == "AI_RATE_LIMITED"
    assert response.json()["retryable"] is True


def test_generate_scenes_missing_openai_key(client, monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", None)

    response = client.post("/api/v1/generate-scenes", json={"prompt": "coffee"})

    assert response.status_code == 500
    assert response.json()["code"] == "CONFIG_ERROR"
    assert "OPENAI_API_KEY not configured" in response.json()["error"]


def test_unexpected_error_is_internal(client):
    with patch("api_gateway.routes.scenes.plan_scenes", new=AsyncMock(side_effect=RuntimeError("bug"))):
        response = client.post("/api/v1/generate-scenes", json={"prompt": "coffee"})

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert response.json()["error"] == "Internal server error"


# Scene rendering

def test_generate_scene_video_caps_frames(client):
    mock_create = AsyncMock(return_value={"id": "pred-1", "status": "starting"})

    with patch("modules.video_generator.scene_video.create_prediction", new=mock_create):
        response = client.post("/api/v1/generate-scene-video", json={"scene": SCENE, "sceneIndex": 2})

    assert response.status_code == 200
    assert response.json() == {"predictionId": "pred-1", "status": "starting", "sceneIndex": 2}
    assert mock_create.await_args.args[1]["num_frames"] == 49


def test_generate_scene_video_overflowing_duration(client):
    mock_create = AsyncMock(return_value={"id": "pred-2", "status": "starting"})
    body = (
        '{"scene": {"text": "Go!", "visuals": "Runner", "style": "energetic", '
        '"duration": 1e400}, "sceneIndex": 0}'
    )

    with patch("modules.video_generator.scene_video.create_prediction", new=mock_create):
        response = client.post(
            "/api/v1/generate-scene-video",
            content=body,
            headers={"content-type": "application/json"}
        )

    assert response.status_code == 200
    assert mock_create.await_args.args[1]["num_frames"] == 40


def test_generate_scene_video_requires_scene(client):
    response = client.post("/api/v1/generate-scene-video", json={"sceneIndex": 0})

    assert response.status_code == 400
    assert response.json()["error"] == "Scene data is required"


def test_generate_scene_video_invalid_scene(client):
    response = client.post("/api/v1/generate-scene-video", json={"scene": {"text": "hi"}})

    assert response.status_code == 400
    assert "style" in response.json()["error"]
    assert "visuals" in response.json()["error"]


def test_generate_scene_video_billing_error(client):
    failure = UpstreamAIError(
        "Insufficient Replicate credits. Please add credits at https://replicate.com/account/billing",
        status_code=402,
        kind=UpstreamAIError.QUOTA,
        provider="replicate"
    )

    with patch("modules.video_generator.scene_video.create_prediction", new=AsyncMock(side_effect=failure)):
        response = client.post("/api/v1/generate-scene-video", json={"scene": SCENE})

    assert response.status_code == 402
    data = response.json()
    assert data["code"] == "AI_QUOTA_EXCEEDED"
    assert "billing" in data["error"]


def test_generate_scene_video_missing_token(client, monkeypatch):
    monkeypatch.setattr(settings, "replicate_api_token", None)

    response = client.post("/api/v1/generate-scene-video", json={"scene": SCENE})

    assert response.status_code == 500
    assert response.json()["code"] == "CONFIG_ERROR"


def test_check_video_status_succeeded(client):
    status = PredictionStatus(status="succeeded", output=["a", "b"])

    with patch("modules.video_generator.scene_video.get_prediction", new=AsyncMock(return_value=status)):
        response = client.post("/api/v1/check-video-status", json={"predictionId": "pred-1"})

    assert response.status_code == 200
    assert response.json() == {"status": "succeeded", "output": ["a", "b"], "error": None, "videoUrl": "a"}


def test_check_video_status_processing(client):
    status = PredictionStatus(status="processing")

    with patch("modules.video_generator.scene_video.get_prediction", new=AsyncMock(return_value=status)):
        response = client.post("/api/v1/check-video-status", json={"predictionId": "pred-1"})

    assert response.json()["videoUrl"] is None


def test_check_video_status_requires_id(client):
    response = client.post("/api/v1/check-video-status", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "Prediction ID is required"


def test_generate_video_with_audio(client):
    mock_image = AsyncMock(return_value="https://images.test/frame.png")

    with patch("modules.video_generator.scene_frame.generate_image", new=mock_image):
        response = client.post("/api/v1/generate-video-with-audio", json={"scene": SCENE, "sceneIndex": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["imageUrl"] == "https://images.test/frame.png"
    assert data["sceneText"] == "Wake up."
    assert data["duration"] == 20
    assert data["status"] == "completed"
    assert data["sceneIndex"] == 1
    assert "pacing for 20 seconds" in data["audioPrompt"]


def test_generate_video_with_audio_requires_scene(client):
    response = client.post("/api/v1/generate-video-with-audio", json={"sceneIndex": 0})

    assert response.status_code == 400
    assert response.json()["error"] == "Scene data is required"


def test_generate_video_with_audio_billing_error(client):
    failure = UpstreamAIError(
        "Insufficient OpenAI credits. Please add credits to your OpenAI account "
        "at https://platform.openai.com/account/billing",
        status_code=402,
        kind=UpstreamAIError.QUOTA,
        provider="openai"
    )

    with patch("modules.video_generator.scene_frame.generate_image", new=AsyncMock(side_effect=failure)):
        response = client.post("/api/v1/generate-video-with-audio", json={"scene": SCENE, "sceneIndex": 0})

    assert response.status_code == 402
    assert response.json()["code"] == "AI_QUOTA_EXCEEDED"


def test_check_video_status_rejects_path_traversal(client):
    response = client.post("/api/v1/check-video-status", json={"predictionId": "../account"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid prediction ID"


# Single-shot flows

def test_generate_prompt_video(client):
    result = {"success": True, "videoUrl": "https://cdn.test/v.mp4", "voiceoverUrl": None}

    with patch("api_gateway.routes.videos.generate_prompt_video", new=AsyncMock(return_value=result)) as mock_flow:
        response = client.post("/api/v1/generate-prompt-video", json={
            "prompt": "a cat", "style": "cinematic", "music": "upbeat", "projectId": "p1", "voiceStyle": "calm"
        })

    assert response.status_code == 200
    assert response.json() == result
    mock_flow.assert_awaited_once_with("a cat", "cinematic", "upbeat", "p1", voice_style="calm")


def test_generate_prompt_video_missing_fields(client):
    response = client.post("/api/v1/generate-prompt-video", json={"prompt": "a cat"})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: style, music, and projectId"


def test_generate_prompt_video_timeout(client):
    timeout = GenerationTimeoutError("Video generation timed out after 60 status checks", attempts=60)

    with patch("api_gateway.routes.videos.generate_prompt_video", new=AsyncMock(side_effect=timeout)):
        response = client.post("/api/v1/generate-prompt-video", json={
            "prompt": "a cat", "style": "cinematic", "music": "upbeat", "projectId": "p1"
        })

    assert response.status_code == 504
    assert response.json()["code"] == "GENERATION_TIMEOUT"
    assert response.json()["retryable"] is True


def test_create_explainer_video(client):
    result = {"success": True, "videoUrl": "https://cdn.test/v.mp4"}

    with patch("api_gateway.routes.videos.create_explainer_video", new=AsyncMock(return_value=result)) as mock_flow:
        response = client.post("/api/v1/create-explainer-video", json={
            "script": "How solar works",
            "animationStyle": "whiteboard",
            "voiceoverStyle": "calm",
            "projectId": "p1",
            "includeMusic": True,
        })

    assert response.status_code == 200
    mock_flow.assert_awaited_once_with(
        "How solar works", "whiteboard", "calm", "p1",
        custom_narration_url=None, include_music=True
    )


def test_generate_ugc_video(client):
    result = {"success": True, "videoUrl": "https://cdn.test/v.mp4"}

    with patch("api_gateway.routes.videos.generate_ugc_video", new=AsyncMock(return_value=result)) as mock_flow:
        response = client.post("/api/v1/generate-ugc-video", json={
            "characterType": "cartoon",
            "script": "Try our app",
            "voiceStyle": "energetic",
            "projectId": "p1",
            "brandColor": "#ff0000",
        })

    assert response.status_code == 200
    assert mock_flow.await_args.kwargs["brand_color"] == "#ff0000"
    assert mock_flow.await_args.kwargs["include_watermark"] is False


def test_generate_ugc_video_voiceover_billing_error(client, mock_project_helpers):
    failure = UpstreamAIError(
        "Insufficient ElevenLabs credits. Please add credits at https://elevenlabs.io/app/subscription",
        status_code=402,
        kind=UpstreamAIError.QUOTA,
        provider="elevenlabs"
    )

    with patch("modules.voiceover.elevenlabs_client.synthesize_speech", new=AsyncMock(side_effect=failure)), \
         patch("modules.video_flows.ugc.render_video", new=AsyncMock(return_value="https://cdn.test/v.mp4")):
        response = client.post("/api/v1/generate-ugc-video", json={
            "characterType": "cartoon",
            "script": "hello",
            "voiceStyle": "calm",
            "projectId": "p1",
        })

    assert response.status_code == 402
    assert response.json()["code"] == "AI_QUOTA_EXCEEDED"
    assert "ElevenLabs credits" in response.json()["error"]


def test_clone_video_style(client):
    result = {"success": True, "videoUrl": "https://cdn.test/v.mp4", "styleAnalysis": "Neon."}

    with patch("api_gateway.routes.videos.clone_video_style", new=AsyncMock(return_value=result)) as mock_flow:
        response = client.post("/api/v1/clone-video-style", json={
            "sampleVideoUrl": "https://samples.test/ref.gif",
            "contentText": "Spring sale",
            "projectId": "p1",
        })

    assert response.status_code == 200
    assert response.json()["styleAnalysis"] == "Neon."
    assert mock_flow.await_args.kwargs["resolution"] == "1080p"
    assert mock_flow.await_args.kwargs["aspect_ratio"] == "16:9"


# Voiceover

def test_generate_voiceover(client):
    with patch(
        "api_gateway.routes.videos.synthesize_voiceover",
        new=AsyncMock(return_value="https://storage.test/voiceovers/p1/a.mp3")
    ) as mock_voice:
        response = client.post("/api/v1/generate-voiceover", json={
            "text": "Hello", "voiceStyle": "calm", "projectId": "p1"
        })

    assert response.status_code == 200
    assert response.json() == {"success": True, "voiceoverUrl": "https://storage.test/voiceovers/p1/a.mp3"}
    mock_voice.assert_awaited_once_with("Hello", "calm", "p1")


def test_generate_voiceover_missing_text(client):
    response = client.post("/api/v1/generate-voiceover", json={"voiceStyle": "calm"})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: text"


def test_generate_voiceover_billing_error_surfaces(client):
    failure = UpstreamAIError(
        "Insufficient ElevenLabs credits. Please add credits at https://elevenlabs.io/app/subscription",
        status_code=402,
        kind=UpstreamAIError.QUOTA,
        provider="elevenlabs"
    )

    with patch("api_gateway.routes.videos.synthesize_voiceover", new=AsyncMock(side_effect=failure)):
        response = client.post("/api/v1/generate-voiceover", json={"text": "Hello", "voiceStyle": "calm"})

    assert response.status_code == 402
    assert "ElevenLabs" in response.json()["error"]


# Scene batches

def test_create_scene_batch(client):
    mock_run = AsyncMock()

    with patch("api_gateway.routes.batches.save_batch", new=AsyncMock()) as mock_save, \
         patch("api_gateway.routes.batches.run_batch", new=mock_run):
        response = client.post("/api/v1/scene-batches", json={"scenes": [SCENE, SCENE], "title": "Coffee"})

    assert response.status_code == 202
    data = response.json()
    assert data["status"] == "submitting"
    assert data["title"] == "Coffee"
    assert [job["sceneIndex"] for job in data["jobs"]] == [0, 1]
    assert data["completedCount"] == 0
    mock_save.assert_awaited_once()

    batch_id, scenes, title = mock_run.call_args.args
    assert batch_id == data["batchId"]
    assert len(scenes) == 2
    assert title == "Coffee"


def test_create_scene_batch_requires_scenes(client):
    response = client.post("/api/v1/scene-batches", json={"scenes": []})

    assert response.status_code == 400
    assert response.json()["error"] == "At least one scene is required"


def test_get_scene_batch_not_found(client):
    with patch("api_gateway.routes.batches.load_batch", new=AsyncMock(return_value=None)):
        response = client.get("/api/v1/scene-batches/unknown")

    assert response.status_code == 404


def test_get_scene_batch(client):
    from shared.models.scene import SceneBatch, SceneJob

    job = SceneJob(scene_index=0)
    job.mark_generating("pred-1")
    job.mark_completed("https://cdn.test/0.mp4")
    batch = SceneBatch(batch_id="b1", jobs=[job])

    with patch("api_gateway.routes.batches.load_batch", new=AsyncMock(return_value=batch)):
        response = client.get("/api/v1/scene-batches/b1")

    assert response.status_code == 200
    assert response.json()["completedCount"] == 1
    assert response.json()["jobs"][0]["videoUrl"] == "https://cdn.test/0.mp4"


@pytest.mark.asyncio
async def test_run_batch_wires_orchestrator(sample_scenes):
    from api_gateway.routes.batches import build_orchestrator, run_batch
    from modules.video_generator import check_prediction, request_scene_video

    orchestrator = build_orchestrator()
    assert orchestrator.submit is request_scene_video
    assert orchestrator.check is check_prediction
    assert orchestrator.poll_interval == settings.scene_poll_interval_seconds
    assert orchestrator.max_attempts == settings.scene_poll_max_attempts

    with patch("api_gateway.routes.batches.build_orchestrator") as mock_build:
        mock_build.return_value.run = AsyncMock(side_effect=RuntimeError("boom"))
        await run_batch("b1", sample_scenes, "Coffee")

    mock_build.return_value.run.assert_awaited_once_with(sample_scenes, batch_id="b1", title="Coffee")
