"""
Project models.

A project is the persisted record behind every generation flow.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.models.scene import CamelModel


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


TERMINAL_PROJECT_STATUSES = frozenset({ProjectStatus.COMPLETED, ProjectStatus.ERROR})


class ProjectType(str, Enum):
    URL_TO_VIDEO = "url_to_video"
    PROMPT_TO_VIDEO = "prompt_to_video"
    UGC_VIDEO = "ugc_video"
    EXPLAINER_VIDEO = "explainer_video"
    SMART_VIDEO = "smart_video"
    VIDEO_CLONE = "video_clone"


class ProjectCreate(CamelModel):
    """Body of POST /projects."""

    title: str = Field(min_length=1, max_length=200)
    type: ProjectType
    video_data: Dict[str, Any] = Field(default_factory=dict)


class Project(BaseModel):
    """Row of the `projects` table (snake_case, as stored)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    title: str
    type: ProjectType
    status: ProjectStatus
    video_data: Dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("video_data", mode="before")
    @classmethod
    def default_video_data(cls, v: Any) -> Any:
        return {} if v is None else v
