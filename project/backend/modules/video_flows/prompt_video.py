"""
Prompt-to-video flow.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shared.validation import require_fields

from modules.video_flows.common import render_video, run_project_flow
from modules.video_generator.scene_video import MAX_FRAMES
from modules.voiceover.elevenlabs_client import try_generate_voiceover


def build_prompt(prompt: str, style: str, music: str) -> str:
    text = (
        f"Create a high-quality video for: {prompt}. Style: {style}. "
        "Professional, cinematic, engaging visuals that represent this content. "
        "High resolution, detailed, vibrant colors."
    )
    if music and music != "none":
        text += f" Pacing suited to {music} background music."
    return text


async def generate_prompt_video(
    prompt: Optional[str],
    style: Optional[str],
    music: Optional[str],
    project_id: Optional[str],
    voice_style: Optional[str] = None
) -> Dict[str, Any]:
    """
    Render a video from a free-text prompt, blocking until it is ready.

    A narration voiceover is attempted when `voice_style` is set and not
    "none"; its failure does not fail the flow.

    Returns:
        {success, videoUrl, voiceoverUrl, ...}
    """
    require_fields({"prompt": prompt, "style": style, "music": music, "projectId": project_id})

    async def _flow() -> Dict[str, Any]:
        video_url = await render_video(
            build_prompt(prompt, style, music),
            {"num_frames": MAX_FRAMES, "num_inference_steps": 50}
        )

        voiceover_url = None
        if voice_style and voice_style != "none":
            voiceover_url = await try_generate_voiceover(prompt, voice_style, project_id)

        return {
            "success": True,
            "videoUrl": video_url,
            "voiceoverUrl": voiceover_url,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "prompt": prompt,
            "style": style,
            "music": music,
        }

    return await run_project_flow(project_id, "prompt-to-video", _flow)
