"""
Video generation endpoints.

Blocking single-shot flows and the standalone voiceover handler.
"""

from fastapi import APIRouter

from shared.logging import get_logger
from shared.models.requests import (
    CloneVideoStyleRequest,
    ExplainerVideoRequest,
    PromptVideoRequest,
    UGCVideoRequest,
    VoiceoverRequest,
)
from shared.validation import require_fields

from modules.video_flows import (
    clone_video_style,
    create_explainer_video,
    generate_prompt_video,
    generate_ugc_video,
)
from modules.voiceover import generate_voiceover as synthesize_voiceover

logger = get_logger(__name__)

router = APIRouter()


@router.post("/generate-prompt-video")
async def generate_prompt_video_endpoint(body: PromptVideoRequest):
    return await generate_prompt_video(
        body.prompt,
        body.style,
        body.music,
        body.project_id,
        voice_style=body.voice_style
    )


@router.post("/create-explainer-video")
async def create_explainer_video_endpoint(body: ExplainerVideoRequest):
    return await create_explainer_video(
        body.script,
        body.animation_style,
        body.voiceover_style,
        body.project_id,
        custom_narration_url=body.custom_narration_url,
        include_music=body.include_music
    )


@router.post("/generate-ugc-video")
async def generate_ugc_video_endpoint(body: UGCVideoRequest):
    return await generate_ugc_video(
        body.character_type,
        body.script,
        body.voice_style,
        body.project_id,
        brand_color=body.brand_color,
        logo_url=body.logo_url,
        include_watermark=body.include_watermark
    )


@router.post("/clone-video-style")
async def clone_video_style_endpoint(body: CloneVideoStyleRequest):
    return await clone_video_style(
        body.sample_video_url,
        body.content_text,
        body.project_id,
        resolution=body.resolution,
        aspect_ratio=body.aspect_ratio,
        logo_url=body.logo_url,
        clip_url=body.clip_url
    )


@router.post("/generate-voiceover")
async def generate_voiceover_endpoint(body: VoiceoverRequest):
    """
    Synthesize narration on its own. Provider errors are returned to the caller.

    Returns:
        {success, voiceoverUrl}
    """
    require_fields({"text": body.text, "voiceStyle": body.voice_style})
    url = await synthesize_voiceover(body.text, body.voice_style, body.project_id)
    return {"success": True, "voiceoverUrl": url}
