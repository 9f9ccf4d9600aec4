"""
Scene endpoints.

Scene planning, per-scene render submission, render status checks and
per-scene still frames with narration prompts.
"""

from fastapi import APIRouter
from pydantic import ValidationError as PydanticValidationError

from shared.errors import ValidationError
from shared.logging import get_logger
from shared.models.requests import (
    CheckVideoStatusRequest,
    GenerateSceneVideoRequest,
    GenerateScenesRequest,
)
from shared.models.scene import Scene

from modules.scene_planner import plan_scenes
from modules.video_generator import check_prediction, render_scene_frame, request_scene_video

logger = get_logger(__name__)

router = APIRouter()


def parse_scene(data: dict) -> Scene:
    """Build a Scene from a request payload."""
    try:
        return Scene.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]}))
        raise ValidationError(f"Invalid scene data: {fields or 'malformed scene'}") from e


@router.post("/generate-scenes")
async def generate_scenes(body: GenerateScenesRequest):
    """
    Plan a video from exactly one of prompt/script.

    Returns:
        {title, scenes}
    """
    result = await plan_scenes(prompt=body.prompt, script=body.script)
    return result.model_dump(by_alias=True)


@router.post("/generate-scene-video")
async def generate_scene_video(body: GenerateSceneVideoRequest):
    """
    Submit the render job for one scene without waiting for it.

    Returns:
        {predictionId, status, sceneIndex}
    """
    if body.scene is None:
        raise ValidationError("Scene data is required")

    submission = await request_scene_video(parse_scene(body.scene), body.scene_index)
    return submission.model_dump(by_alias=True)


@router.post("/generate-video-with-audio")
async def generate_video_with_audio(body: GenerateSceneVideoRequest):
    """
    Generate a still frame for one scene plus its narration prompt.

    Returns:
        {imageUrl, sceneText, audioPrompt, duration, status, sceneIndex}
    """
    if body.scene is None:
        raise ValidationError("Scene data is required")

    frame = await render_scene_frame(parse_scene(body.scene), body.scene_index)
    return frame.model_dump(by_alias=True)


@router.post("/check-video-status")
async def check_video_status(body: CheckVideoStatusRequest):
    """
    Pass-through status check of a render job.

    Returns:
        {status, output, error, videoUrl}
    """
    prediction = await check_prediction(body.prediction_id)
    return {
        "status": prediction.status,
        "output": prediction.output,
        "error": prediction.error,
        "videoUrl": prediction.video_url
    }
