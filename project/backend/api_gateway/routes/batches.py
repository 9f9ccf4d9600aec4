"""
Scene batch endpoints.

POST starts a server-run batch in the background; GET returns the latest
snapshot published by the orchestrator.
"""

import asyncio
import uuid
from typing import List, Optional, Set

from fastapi import APIRouter, HTTPException, Path, status

from shared.config import settings
from shared.errors import ValidationError
from shared.logging import get_logger
from shared.models.requests import SceneBatchRequest
from shared.models.scene import Scene, SceneBatch, SceneJob

from api_gateway.orchestrator import SceneBatchOrchestrator
from api_gateway.routes.scenes import parse_scene
from api_gateway.services.batch_store import load_batch, save_batch
from modules.video_generator import check_prediction, request_scene_video

logger = get_logger(__name__)

router = APIRouter()

# Strong references so running batches are not garbage collected
_running: Set[asyncio.Task] = set()


def build_orchestrator() -> SceneBatchOrchestrator:
    return SceneBatchOrchestrator(
        submit=request_scene_video,
        check=check_prediction,
        poll_interval=settings.scene_poll_interval_seconds,
        max_attempts=settings.scene_poll_max_attempts,
        on_update=save_batch
    )


async def run_batch(batch_id: str, scenes: List[Scene], title: Optional[str]) -> None:
    try:
        await build_orchestrator().run(scenes, batch_id=batch_id, title=title)
    except Exception as e:
        logger.error("Scene batch crashed", exc_info=e, extra={"batch_id": batch_id})


@router.post("/scene-batches", status_code=status.HTTP_202_ACCEPTED)
async def create_scene_batch(body: SceneBatchRequest):
    """
    Start rendering every scene of a plan.

    Returns:
        Initial SceneBatch snapshot (status submitting)
    """
    if not body.scenes:
        raise ValidationError("At least one scene is required")

    scenes = [parse_scene(scene) for scene in body.scenes]
    batch = SceneBatch(
        batch_id=str(uuid.uuid4()),
        title=body.title,
        jobs=[SceneJob(scene_index=index) for index in range(len(scenes))]
    )
    await save_batch(batch)

    task = asyncio.create_task(run_batch(batch.batch_id, scenes, body.title))
    _running.add(task)
    task.add_done_callback(_running.discard)

    logger.info("Scene batch accepted", extra={"batch_id": batch.batch_id, "scenes": len(scenes)})
    return batch.model_dump(mode="json", by_alias=True)


@router.get("/scene-batches/{batch_id}")
async def get_scene_batch(batch_id: str = Path(...)):
    """
    Latest snapshot of a batch.

    Returns:
        SceneBatch

    Raises:
        HTTPException: 404 if unknown or expired
    """
    batch = await load_batch(batch_id)
    if batch is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Scene batch not found"
        )
    return batch.model_dump(mode="json", by_alias=True)
