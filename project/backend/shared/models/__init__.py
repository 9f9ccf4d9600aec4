"""
Data models for the video generation handlers.

This module exports all Pydantic models used across modules.
"""

from shared.models.scene import (
    DEFAULT_SCENE_DURATION,
    TERMINAL_JOB_STATUSES,
    BatchStatus,
    PredictionStatus,
    Scene,
    SceneBatch,
    SceneFrame,
    SceneJob,
    SceneJobStatus,
    ScenesResult,
    SceneSubmission,
)
from shared.models.project import (
    TERMINAL_PROJECT_STATUSES,
    Project,
    ProjectCreate,
    ProjectStatus,
    ProjectType,
)

__all__ = [
    # Scene models
    "DEFAULT_SCENE_DURATION",
    "Scene",
    "ScenesResult",
    "SceneSubmission",
    "SceneFrame",
    "PredictionStatus",
    # Batch models
    "TERMINAL_JOB_STATUSES",
    "SceneJobStatus",
    "SceneJob",
    "BatchStatus",
    "SceneBatch",
    # Project models
    "TERMINAL_PROJECT_STATUSES",
    "ProjectStatus",
    "ProjectType",
    "Project",
    "ProjectCreate",
]
