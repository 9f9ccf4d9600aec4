"""
Project endpoints.

Create, list, read and retry the dashboard's project records.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from shared.database import db
from shared.errors import ValidationError
from shared.logging import get_logger
from shared.models.project import Project, ProjectCreate, ProjectStatus, TERMINAL_PROJECT_STATUSES
from shared.projects import PROJECTS_TABLE, mark_processing
from api_gateway.dependencies import get_current_user, verify_project_ownership

logger = get_logger(__name__)

router = APIRouter()

VALID_STATUSES = [s.value for s in ProjectStatus]


@router.post("/projects", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Create a project in processing state.

    Returns:
        The inserted row
    """
    row = {
        "user_id": current_user["user_id"],
        "title": body.title,
        "type": body.type.value,
        "status": ProjectStatus.PROCESSING.value,
        "video_data": body.video_data,
    }

    try:
        result = await db.table(PROJECTS_TABLE).insert(row).execute()
    except Exception as e:
        logger.error("Failed to create project", exc_info=e, extra={"user_id": current_user["user_id"]})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create project"
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create project"
        )

    project = Project.model_validate(result.data[0])
    logger.info("Project created", extra={"project_id": project.id, "type": row["type"]})
    return project.model_dump(mode="json")


@router.get("/projects")
async def list_projects(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(10, ge=1, le=50),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user)
):
    """
    List the user's projects, newest first.

    Args:
        status_filter: Filter by status (draft, processing, completed, error)
        limit: Number of results (default: 10, max: 50)
        offset: Pagination offset (default: 0)
        current_user: Current authenticated user

    Returns:
        Projects list with total, limit, offset
    """
    user_id = current_user["user_id"]

    if status_filter and status_filter not in VALID_STATUSES:
        raise ValidationError(f"Invalid status filter. Must be one of: {VALID_STATUSES}")

    try:
        query = db.table(PROJECTS_TABLE).select("*", count="exact").eq("user_id", user_id)
        if status_filter:
            query = query.eq("status", status_filter)

        result = await query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
    except Exception as e:
        logger.error("Failed to list projects", exc_info=e, extra={"user_id": user_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list projects"
        )

    projects = [Project.model_validate(row).model_dump(mode="json") for row in result.data or []]
    total = getattr(result, "count", None)
    return {
        "projects": projects,
        "total": total if total is not None else len(projects),
        "limit": limit,
        "offset": offset
    }


@router.get("/projects/{project_id}")
async def get_project_endpoint(
    project_id: str = Path(...),
    current_user: dict = Depends(get_current_user)
):
    project = await verify_project_ownership(project_id, current_user)
    return Project.model_validate(project).model_dump(mode="json")


@router.post("/projects/{project_id}/retry")
async def retry_project(
    project_id: str = Path(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Put a finished project back into processing ("try again").

    Returns:
        {id, status}
    """
    project = await verify_project_ownership(project_id, current_user)

    project_status = project.get("status")
    if project_status not in {s.value for s in TERMINAL_PROJECT_STATUSES}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot retry project with status: {project_status}"
        )

    if not await mark_processing(project_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retry project"
        )

    logger.info("Project retried", extra={"project_id": project_id, "previous_status": project_status})
    return {"id": project_id, "status": ProjectStatus.PROCESSING.value}
