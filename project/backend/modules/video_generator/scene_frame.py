"""
Per-scene still frames with narration prompts.

The image-and-narration path for a scene: one generated frame plus the
instructions a client-side speech synthesizer needs to voice the scene.
"""

from typing import Optional

from shared.errors import ValidationError
from shared.llm import generate_image
from shared.logging import get_logger
from shared.models.scene import Scene, SceneFrame

logger = get_logger("video_generator")


def build_frame_prompt(scene: Scene) -> str:
    return (
        f"Create a cinematic video frame showing: {scene.visuals}. Style: {scene.style}, "
        "high quality, professional cinematography, detailed and engaging composition."
    )


def build_audio_prompt(scene: Scene) -> str:
    return (
        f'Generate natural, engaging narration for this video scene: "{scene.text}". '
        f"Style: {scene.style}, clear pronunciation, appropriate pacing for {scene.duration} seconds."
    )


async def render_scene_frame(scene: Optional[Scene], scene_index: int) -> SceneFrame:
    """
    Generate the frame for one scene and attach its narration prompt.

    Args:
        scene: Scene to illustrate
        scene_index: Position of the scene in the plan

    Returns:
        SceneFrame with status "completed"

    Raises:
        ValidationError: If scene data is absent
        UpstreamAIError: If image generation fails or returns no image
    """
    if scene is None:
        raise ValidationError("Scene data is required")

    logger.info(f"Generating frame for scene {scene_index}")
    image_url = await generate_image(build_frame_prompt(scene))

    logger.info(f"Scene {scene_index}: frame and narration prompt ready")
    return SceneFrame(
        image_url=image_url,
        scene_text=scene.text,
        audio_prompt=build_audio_prompt(scene),
        duration=scene.duration,
        scene_index=scene_index
    )
