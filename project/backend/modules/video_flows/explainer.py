"""
Explainer video flow.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shared.validation import require_fields

from modules.video_flows.common import render_video, run_project_flow
from modules.video_generator.scene_video import MAX_FRAMES
from modules.voiceover.elevenlabs_client import try_generate_voiceover

MAX_POLL_ATTEMPTS = 72

DEFAULT_ANIMATION_STYLE = "2d-flat"
ANIMATION_STYLES = {
    "2d-flat": "Modern 2D flat design animation, clean icons, minimal style, smooth transitions",
    "motion-graphics": "Professional motion graphics, dynamic text, infographic style, corporate feel",
    "whiteboard": "Whiteboard animation style, hand-drawn elements, sketch-like appearance, educational feel",
    "isometric": "Isometric 3D perspective animation with depth, modern architectural style",
    "character-driven": "Character-driven narrative animation with personas and storytelling",
}


def describe_animation(animation_style: str) -> str:
    """Look up a style; underscores are accepted for hyphens."""
    key = animation_style.replace("_", "-")
    return ANIMATION_STYLES.get(key, ANIMATION_STYLES[DEFAULT_ANIMATION_STYLE])


def build_prompt(script: str, animation_style: str, include_music: bool) -> str:
    return (
        f"Create an explainer video with {describe_animation(animation_style)}. "
        f'Content to explain: "{script}". '
        "Style: Educational, professional, engaging explainer video with animated icons, "
        "text overlays, and smooth transitions. Include visual metaphors and diagrams that "
        "support the explanation. High quality animation, clear and informative. "
        + ("Upbeat rhythm suited to background music." if include_music else "Clean, focused visuals.")
    )


async def create_explainer_video(
    script: Optional[str],
    animation_style: Optional[str],
    voiceover_style: Optional[str],
    project_id: Optional[str],
    custom_narration_url: Optional[str] = None,
    include_music: bool = False
) -> Dict[str, Any]:
    """
    Render an animated explainer video, blocking until it is ready.

    A voiceover is generated only when no custom narration is supplied and
    the voiceover style is not "none".

    Returns:
        {success, videoUrl, voiceoverUrl, voiceoverGenerated, ...}
    """
    require_fields({
        "script": script,
        "animationStyle": animation_style,
        "voiceoverStyle": voiceover_style,
        "projectId": project_id,
    })

    async def _flow() -> Dict[str, Any]:
        video_url = await render_video(
            build_prompt(script, animation_style, include_music),
            {"num_frames": MAX_FRAMES, "num_inference_steps": 50},
            max_attempts=MAX_POLL_ATTEMPTS
        )

        voiceover_url = custom_narration_url
        voiceover_generated = False
        if not custom_narration_url and voiceover_style != "none":
            voiceover_url = await try_generate_voiceover(script, voiceover_style, project_id)
            voiceover_generated = voiceover_url is not None

        return {
            "success": True,
            "videoUrl": video_url,
            "voiceoverUrl": voiceover_url,
            "voiceoverGenerated": voiceover_generated,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "animationStyle": animation_style,
            "script": script,
            "includeMusic": include_music,
        }

    return await run_project_flow(project_id, "explainer-video", _flow)
