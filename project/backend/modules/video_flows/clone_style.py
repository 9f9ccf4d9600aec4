"""
Video style cloning flow.

Describe the look of a sample with the LLM, then render new content in it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shared.config import settings
from shared.llm import complete_text
from shared.logging import get_logger
from shared.validation import require_fields, validate_url

from modules.video_flows.common import render_video, run_project_flow
from modules.video_generator.scene_video import MAX_FRAMES

logger = get_logger("video_flows")

MAX_POLL_ATTEMPTS = 72

ANALYSIS_PROMPT = (
    "Analyze this video and describe its visual style, pacing, transitions, color scheme, "
    "typography, and overall aesthetic in detail. Focus on elements that can be replicated."
)


async def analyze_style(sample_video_url: str) -> str:
    """Ask the vision model for a reproducible description of the sample's style."""
    return await complete_text(
        [
            {"role": "system", "content": ANALYSIS_PROMPT},
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": "Please analyze the style of this video and provide a detailed description.",
                    },
                    {"type": "image_url", "image_url": {"url": sample_video_url}},
                ],
            },
        ],
        model=settings.openai_vision_model
    )


def build_prompt(style_description: str, content_text: str, resolution: str, aspect_ratio: str) -> str:
    return (
        f"Create a video matching this style: {style_description}. "
        f'Content: "{content_text}". '
        f"Resolution: {resolution}, Aspect ratio: {aspect_ratio}. "
        "High quality, professional, engaging video with the same visual style and aesthetic."
    )


async def clone_video_style(
    sample_video_url: Optional[str],
    content_text: Optional[str],
    project_id: Optional[str],
    resolution: str = "1080p",
    aspect_ratio: str = "16:9",
    logo_url: Optional[str] = None,
    clip_url: Optional[str] = None
) -> Dict[str, Any]:
    """
    Render new content in the style of a sample video.

    Returns:
        {success, videoUrl, styleAnalysis, ...}
    """
    require_fields({
        "sampleVideoUrl": sample_video_url,
        "contentText": content_text,
        "projectId": project_id,
    })
    sample_video_url = validate_url(sample_video_url)

    async def _flow() -> Dict[str, Any]:
        style_description = await analyze_style(sample_video_url)
        logger.info("Style analysis completed", extra={"chars": len(style_description)})

        video_url = await render_video(
            build_prompt(style_description, content_text, resolution, aspect_ratio),
            {"num_frames": MAX_FRAMES, "num_inference_steps": 50},
            max_attempts=MAX_POLL_ATTEMPTS
        )

        return {
            "success": True,
            "videoUrl": video_url,
            "styleAnalysis": style_description,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "resolution": resolution,
            "aspectRatio": aspect_ratio,
            "contentText": content_text,
            "logoUrl": logo_url,
            "clipUrl": clip_url,
        }

    return await run_project_flow(project_id, "clone-video-style", _flow)
