"""
Per-scene video requests and status checks.
"""

import re
from typing import Optional

from shared.config import settings
from shared.errors import ValidationError
from shared.logging import get_logger
from shared.models.scene import PredictionStatus, Scene, SceneSubmission
from shared.validation import is_blank

from modules.video_generator.replicate_client import create_prediction, get_prediction

logger = get_logger("video_generator")

FRAMES_PER_SECOND = 8
MAX_FRAMES = 49  # provider maximum for the scene model
NUM_INFERENCE_STEPS = 50

# Replicate prediction ids are URL-safe tokens
PREDICTION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,128}")


def build_scene_prompt(scene: Scene) -> str:
    """Natural-language render instructions for one scene."""
    return f"{scene.visuals}. {scene.style} style. High quality, cinematic, {scene.duration} seconds."


def frame_count(duration: int) -> int:
    """Frames to request for a duration, capped at the provider maximum."""
    return min(duration * FRAMES_PER_SECOND, MAX_FRAMES)


async def request_scene_video(scene: Optional[Scene], scene_index: int) -> SceneSubmission:
    """
    Submit a render job for one scene and return without waiting.

    Args:
        scene: Scene to render
        scene_index: Position of the scene in the plan

    Returns:
        SceneSubmission with the provider job ID and initial status

    Raises:
        ValidationError: If scene data is absent
        UpstreamAIError: If the provider rejects the job
    """
    if scene is None:
        raise ValidationError("Scene data is required")

    prompt = build_scene_prompt(scene)
    logger.info(f"Generating video for scene {scene_index}: {prompt}")

    prediction = await create_prediction(
        settings.replicate_scene_model_version,
        {
            "prompt": prompt,
            "num_frames": frame_count(scene.duration),
            "num_inference_steps": NUM_INFERENCE_STEPS,
        }
    )

    return SceneSubmission(
        prediction_id=prediction["id"],
        status=prediction.get("status", "starting"),
        scene_index=scene_index
    )


async def check_prediction(prediction_id: Optional[str]) -> PredictionStatus:
    """
    Single pass-through status query.

    Args:
        prediction_id: Provider job identifier

    Returns:
        PredictionStatus as reported by the provider

    Raises:
        ValidationError: If the ID is missing or not a provider token
        UpstreamAIError: If the status query fails
    """
    if is_blank(prediction_id):
        raise ValidationError("Prediction ID is required")
    prediction_id = prediction_id.strip()
    if not PREDICTION_ID_PATTERN.fullmatch(prediction_id):
        raise ValidationError("Invalid prediction ID")
    return await get_prediction(prediction_id)
