"""
Scene batch orchestration.

Submits one render job per scene concurrently, then polls every job still in
flight on a fixed interval until all of them finish or the attempt ceiling
is reached.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from shared.logging import get_logger, set_job_id
from shared.models.scene import (
    BatchStatus,
    PredictionStatus,
    Scene,
    SceneBatch,
    SceneJob,
    SceneSubmission,
)
from shared.polling import poll_until

from modules.video_generator.replicate_client import FAILED_STATUSES

logger = get_logger(__name__)

T = TypeVar("T")

SubmitFn = Callable[[Scene, int], Awaitable[SceneSubmission]]
CheckFn = Callable[[str], Awaitable[PredictionStatus]]
UpdateFn = Callable[[SceneBatch], Awaitable[None]]


@dataclass
class Outcome(Generic[T]):
    """Settled result of one concurrent call."""

    ok: bool
    value: Optional[T] = None
    reason: Optional[str] = None


async def settle(awaitable: Awaitable[T]) -> Outcome[T]:
    """Await and capture the result or the failure, never raising."""
    try:
        return Outcome(ok=True, value=await awaitable)
    except Exception as e:
        return Outcome(ok=False, reason=str(e) or type(e).__name__)


class SceneBatchOrchestrator:
    """Drives all scene jobs of one batch to a terminal state."""

    def __init__(
        self,
        submit: SubmitFn,
        check: CheckFn,
        poll_interval: float = 3.0,
        max_attempts: int = 100,
        on_update: Optional[UpdateFn] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Args:
            submit: Starts the render job for (scene, scene_index)
            check: Fetches the provider status for a job ID
            poll_interval: Seconds between poll rounds
            max_attempts: Maximum number of poll rounds
            on_update: Awaited with the batch after submission and every round
            sleep: Sleep function (injectable for tests)
        """
        self.submit = submit
        self.check = check
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.on_update = on_update
        self.sleep = sleep

    async def _notify(self, batch: SceneBatch) -> None:
        batch.touch()
        if self.on_update is None:
            return
        try:
            await self.on_update(batch)
        except Exception as e:
            logger.warning("Batch update callback failed", exc_info=e, extra={"batch_id": batch.batch_id})

    async def _submit_all(self, batch: SceneBatch, scenes: List[Scene]) -> None:
        outcomes = await asyncio.gather(*(
            settle(self.submit(scene, index)) for index, scene in enumerate(scenes)
        ))

        for job, outcome in zip(batch.jobs, outcomes):
            if outcome.ok:
                job.mark_generating(outcome.value.prediction_id)
            else:
                logger.warning(
                    "Scene submission failed",
                    extra={"batch_id": batch.batch_id, "scene_index": job.scene_index, "reason": outcome.reason}
                )
                job.mark_error(outcome.reason)

    def _apply_status(self, job: SceneJob, status: PredictionStatus) -> None:
        if status.status == "succeeded" and status.video_url:
            job.mark_completed(status.video_url)
        elif status.status in FAILED_STATUSES:
            job.mark_error(str(status.error) if status.error else "Video generation failed")

    async def _poll_round(self, batch: SceneBatch) -> None:
        pending = [job for job in batch.submitted_jobs if not job.is_terminal]
        outcomes = await asyncio.gather(*(settle(self.check(job.job_id)) for job in pending))

        for job, outcome in zip(pending, outcomes):
            if outcome.ok:
                self._apply_status(job, outcome.value)
            else:
                # retried next round
                logger.warning(
                    "Scene status check failed",
                    extra={"batch_id": batch.batch_id, "job_id": job.job_id, "reason": outcome.reason}
                )

    async def run(
        self,
        scenes: List[Scene],
        batch_id: Optional[str] = None,
        title: Optional[str] = None
    ) -> SceneBatch:
        """
        Render every scene and wait for the results.

        Args:
            scenes: Scenes in playback order
            batch_id: Batch identifier (generated when omitted)
            title: Video title carried on the batch

        Returns:
            Final SceneBatch (status finished or timed_out)
        """
        batch = SceneBatch(
            batch_id=batch_id or str(uuid.uuid4()),
            title=title,
            jobs=[SceneJob(scene_index=index) for index in range(len(scenes))]
        )
        set_job_id(batch.batch_id)
        logger.info("Starting scene batch", extra={"batch_id": batch.batch_id, "scenes": len(scenes)})

        await self._submit_all(batch, scenes)

        if not batch.submitted_jobs:
            batch.status = BatchStatus.FINISHED
            logger.warning("No scene jobs were accepted", extra={"batch_id": batch.batch_id})
            await self._notify(batch)
            return batch

        batch.status = BatchStatus.POLLING
        await self._notify(batch)

        async def tick(attempt: int) -> Optional[bool]:
            batch.attempts = attempt
            await self._poll_round(batch)
            done = all(job.is_terminal for job in batch.submitted_jobs)
            if done:
                batch.status = BatchStatus.FINISHED
            await self._notify(batch)
            return True if done else None

        outcome = await poll_until(tick, self.poll_interval, self.max_attempts, sleep=self.sleep)

        if outcome.timed_out:
            for job in batch.submitted_jobs:
                if not job.is_terminal:
                    job.timed_out = True
            batch.status = BatchStatus.TIMED_OUT
            await self._notify(batch)
            logger.warning(
                "Scene batch timed out",
                extra={"batch_id": batch.batch_id, "attempts": outcome.attempts}
            )

        logger.info(
            "Scene batch finished",
            extra={
                "batch_id": batch.batch_id,
                "status": batch.status.value,
                "completed": batch.completed_count,
                "errors": batch.error_count,
            }
        )
        return batch
