"""
Project record helpers.

Field-overwrite updates of the `projects` table. There is no concurrency
token: the last writer wins.
"""

from typing import Any, Dict, Optional

from shared.database import db
from shared.logging import get_logger
from shared.models.project import ProjectStatus

logger = get_logger(__name__)

PROJECTS_TABLE = "projects"


async def get_project(project_id: str) -> Optional[Dict[str, Any]]:
    """
    Fetch a project row.

    Args:
        project_id: Project ID

    Returns:
        Row dictionary or None if not found
    """
    result = await db.table(PROJECTS_TABLE).select("*").eq("id", project_id).execute()
    if result.data:
        return result.data[0]
    return None


async def update_project(project_id: str, fields: Dict[str, Any]) -> bool:
    """
    Overwrite fields on a project.

    Failures are logged, not raised: a generation result is still returned
    to the caller even when the dashboard record could not be updated.

    Args:
        project_id: Project ID
        fields: Columns to overwrite

    Returns:
        True if the update was issued successfully
    """
    try:
        await db.table(PROJECTS_TABLE).update(
            {**fields, "updated_at": "now()"}
        ).eq("id", project_id).execute()
        logger.debug(
            "Project updated",
            extra={"project_id": project_id, "fields": sorted(fields)}
        )
        return True
    except Exception as e:
        logger.error("Failed to update project", exc_info=e, extra={"project_id": project_id})
        return False


async def mark_processing(project_id: str) -> bool:
    return await update_project(project_id, {
        "status": ProjectStatus.PROCESSING.value,
        "error_message": None
    })


async def mark_completed(project_id: str, video_data: Dict[str, Any]) -> bool:
    return await update_project(project_id, {
        "status": ProjectStatus.COMPLETED.value,
        "video_data": video_data,
        "error_message": None
    })


async def mark_error(project_id: str, message: str) -> bool:
    return await update_project(project_id, {
        "status": ProjectStatus.ERROR.value,
        "error_message": message
    })


async def save_draft(project_id: str, video_data: Dict[str, Any]) -> bool:
    """Store extracted content as the project's payload and mark it draft."""
    return await update_project(project_id, {
        "video_data": video_data,
        "status": ProjectStatus.DRAFT.value
    })
