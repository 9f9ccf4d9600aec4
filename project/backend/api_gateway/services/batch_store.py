"""
Scene batch snapshots.

Server-run batches publish their latest state to Redis so that clients can
poll GET /scene-batches/{id} while the orchestrator is still working.
"""

from typing import Optional

from shared.logging import get_logger
from shared.models.scene import SceneBatch
from shared.redis_client import redis_client

logger = get_logger(__name__)

BATCH_TTL_SECONDS = 3600


def _key(batch_id: str) -> str:
    return f"scene_batch:{batch_id}"


async def save_batch(batch: SceneBatch) -> None:
    """Store the batch snapshot (overwrites the previous one)."""
    await redis_client.set_json(
        _key(batch.batch_id),
        batch.model_dump(mode="json", by_alias=True),
        ttl=BATCH_TTL_SECONDS
    )
    logger.debug(
        "Batch snapshot saved",
        extra={"batch_id": batch.batch_id, "status": batch.status.value}
    )


async def load_batch(batch_id: str) -> Optional[SceneBatch]:
    """
    Load the latest snapshot.

    Returns:
        SceneBatch or None if unknown or expired
    """
    data = await redis_client.get_json(_key(batch_id))
    if data is None:
        return None
    # computed counts are derived again from the jobs
    data.pop("completedCount", None)
    data.pop("errorCount", None)
    return SceneBatch.model_validate(data)
