"""
Scene models.

Scenes produced by the planner and the per-scene job records tracked by the
batch orchestrator.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_SCENE_DURATION = 5


class CamelModel(BaseModel):
    """Base model serialized with camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Scene(CamelModel):
    """One short segment of a planned video."""

    text: str
    visuals: str
    style: str
    duration: int = DEFAULT_SCENE_DURATION

    @field_validator("duration", mode="before")
    @classmethod
    def coerce_duration(cls, v: Any) -> Any:
        """Missing, non-numeric or non-positive durations fall back to the default."""
        if v is None or isinstance(v, bool):
            return DEFAULT_SCENE_DURATION
        if isinstance(v, str):
            try:
                v = float(v.strip())
            except ValueError:
                return DEFAULT_SCENE_DURATION
        if isinstance(v, float) and not math.isfinite(v):
            return DEFAULT_SCENE_DURATION
        if isinstance(v, (int, float)):
            seconds = int(round(v))
            return seconds if seconds > 0 else DEFAULT_SCENE_DURATION
        return v


class ScenesResult(CamelModel):
    """Planner output: a title plus scenes in playback order."""

    title: str
    scenes: List[Scene] = Field(min_length=1)


class SceneSubmission(CamelModel):
    """Handle returned when a scene's render job is accepted by the provider."""

    prediction_id: str
    status: str
    scene_index: int


class SceneFrame(CamelModel):
    """Still frame plus narration instructions for one scene."""

    image_url: str
    scene_text: str
    audio_prompt: str
    duration: int
    status: str = "completed"
    scene_index: int


class PredictionStatus(CamelModel):
    """Provider-reported state of a render job, passed through verbatim."""

    status: str
    output: Any = None
    error: Any = None

    @property
    def video_url(self) -> Optional[str]:
        """First output URL once the job has succeeded."""
        if self.status != "succeeded" or not self.output:
            return None
        if isinstance(self.output, list):
            return self.output[0]
        if isinstance(self.output, str):
            return self.output
        return None


class SceneJobStatus(str, Enum):
    """Per-scene job state. Only moves forward."""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"


TERMINAL_JOB_STATUSES = frozenset({SceneJobStatus.COMPLETED, SceneJobStatus.ERROR})


class SceneJob(CamelModel):
    """Render job for the scene at `scene_index` (array position is the join key)."""

    scene_index: int
    job_id: Optional[str] = None
    status: SceneJobStatus = SceneJobStatus.PENDING
    video_url: Optional[str] = None
    error: Optional[str] = None
    timed_out: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES

    def mark_generating(self, job_id: str) -> bool:
        if self.status != SceneJobStatus.PENDING:
            return False
        self.job_id = job_id
        self.status = SceneJobStatus.GENERATING
        return True

    def mark_completed(self, video_url: str) -> bool:
        if self.is_terminal:
            return False
        self.video_url = video_url
        self.status = SceneJobStatus.COMPLETED
        return True

    def mark_error(self, reason: Optional[str]) -> bool:
        if self.is_terminal:
            return False
        self.error = reason
        self.status = SceneJobStatus.ERROR
        return True


class BatchStatus(str, Enum):
    """Lifecycle of a scene batch."""

    SUBMITTING = "submitting"
    POLLING = "polling"
    FINISHED = "finished"
    TIMED_OUT = "timed_out"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SceneBatch(CamelModel):
    """All scene jobs derived from one ScenesResult."""

    batch_id: str
    title: Optional[str] = None
    status: BatchStatus = BatchStatus.SUBMITTING
    jobs: List[SceneJob] = Field(default_factory=list)
    attempts: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @computed_field(alias="completedCount")
    @property
    def completed_count(self) -> int:
        return sum(1 for job in self.jobs if job.status == SceneJobStatus.COMPLETED)

    @computed_field(alias="errorCount")
    @property
    def error_count(self) -> int:
        return sum(1 for job in self.jobs if job.status == SceneJobStatus.ERROR)

    @property
    def submitted_jobs(self) -> List[SceneJob]:
        """Jobs that obtained a provider job ID."""
        return [job for job in self.jobs if job.job_id is not None]

    @property
    def is_done(self) -> bool:
        return self.status in (BatchStatus.FINISHED, BatchStatus.TIMED_OUT)

    def touch(self) -> None:
        self.updated_at = _utcnow()
