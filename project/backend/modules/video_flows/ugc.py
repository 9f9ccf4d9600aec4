"""
UGC (user-generated-content style) video flow.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shared.config import settings
from shared.validation import require_fields

from modules.video_flows.common import render_video, run_project_flow
from modules.voiceover.elevenlabs_client import generate_voiceover

DEFAULT_CHARACTER = "realistic-human"
CHARACTER_PROMPTS = {
    "realistic-human": "Realistic human influencer, natural lighting, professional setup",
    "cartoon": "Animated cartoon character, vibrant colors, fun and engaging",
    "ai-influencer": "Modern AI-generated influencer, perfect lighting, trendy background",
}

# 9:16 vertical render for social feeds
RENDER_INPUT = {
    "num_frames": 120,
    "num_inference_steps": 20,
    "width": 1080,
    "height": 1920,
    "fps": 8,
}


def build_prompt(
    character_type: str,
    script: str,
    brand_color: Optional[str],
    include_watermark: bool
) -> str:
    character = CHARACTER_PROMPTS.get(character_type, CHARACTER_PROMPTS[DEFAULT_CHARACTER])
    text = (
        f"Create a UGC-style promotional video featuring a {character}. "
        f'The character should be presenting this content: "{script}". '
        "Style: Social media UGC format, engaging, authentic, with captions and emojis. "
    )
    if brand_color:
        text += f"Brand color: {brand_color}. "
    text += (
        "Professional quality but authentic UGC feel. "
        "Include dynamic text overlays and smooth transitions."
    )
    if include_watermark:
        text += " Leave a clear corner for a brand watermark."
    return text


async def generate_ugc_video(
    character_type: Optional[str],
    script: Optional[str],
    voice_style: Optional[str],
    project_id: Optional[str],
    brand_color: Optional[str] = None,
    logo_url: Optional[str] = None,
    include_watermark: bool = False
) -> Dict[str, Any]:
    """
    Render a vertical UGC-style video with a narration track.

    Returns:
        {success, videoUrl, voiceoverUrl, voiceoverGenerated, ...}
    """
    require_fields({
        "characterType": character_type,
        "script": script,
        "voiceStyle": voice_style,
        "projectId": project_id,
    })

    async def _flow() -> Dict[str, Any]:
        # narration errors fail the flow with the provider status
        voiceover_url = await generate_voiceover(script, voice_style, project_id)

        video_url = await render_video(
            build_prompt(character_type, script, brand_color, include_watermark),
            RENDER_INPUT,
            version=settings.replicate_ugc_model_version
        )

        return {
            "success": True,
            "videoUrl": video_url,
            "voiceoverUrl": voiceover_url,
            "voiceoverGenerated": True,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "characterType": character_type,
            "script": script,
            "voiceStyle": voice_style,
            "brandColor": brand_color,
            "logoUrl": logo_url,
        }

    return await run_project_flow(project_id, "ugc-video", _flow)
