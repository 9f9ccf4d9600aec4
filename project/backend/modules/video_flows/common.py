"""
Shared plumbing for the single-shot video flows.
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from shared.config import settings
from shared.logging import get_logger, set_job_id
from shared.projects import mark_completed, mark_error, mark_processing

from modules.video_generator.replicate_client import create_prediction, wait_for_prediction

logger = get_logger("video_flows")


async def render_video(
    prompt: str,
    model_input: Optional[Dict[str, Any]] = None,
    version: Optional[str] = None,
    max_attempts: Optional[int] = None
) -> str:
    """
    Submit a render job and block until it produces a video.

    Args:
        prompt: Render prompt
        model_input: Extra model inputs (frames, size, ...)
        version: Model version (default: the scene model)
        max_attempts: Poll ceiling (default settings.render_poll_max_attempts)

    Returns:
        Video URL
    """
    prediction = await create_prediction(
        version or settings.replicate_scene_model_version,
        {"prompt": prompt, **(model_input or {})}
    )
    logger.info("Video generation started", extra={"prediction_id": prediction["id"]})
    return await wait_for_prediction(prediction["id"], max_attempts=max_attempts)


async def run_project_flow(
    project_id: str,
    flow_name: str,
    flow: Callable[[], Awaitable[Dict[str, Any]]]
) -> Dict[str, Any]:
    """
    Run a flow while keeping its project record in step.

    The project goes to processing, then completed (result stored as
    video_data) or error (message stored) before the exception propagates.

    Args:
        project_id: Project the flow belongs to
        flow_name: Name used in logs
        flow: Coroutine function producing the result dictionary

    Returns:
        The flow's result
    """
    set_job_id(project_id)
    logger.info(f"Starting {flow_name}", extra={"project_id": project_id})
    await mark_processing(project_id)

    try:
        result = await flow()
    except Exception as e:
        logger.error(f"{flow_name} failed", exc_info=e, extra={"project_id": project_id})
        await mark_error(project_id, str(e))
        raise

    await mark_completed(project_id, result)
    logger.info(f"{flow_name} completed", extra={"project_id": project_id})
    return result
