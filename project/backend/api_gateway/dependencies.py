"""
FastAPI dependencies.

Authentication and project ownership checks.
"""

import hashlib
import json

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from shared.config import settings
from shared.logging import get_logger
from shared.projects import get_project
from shared.redis_client import redis_client

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer()

JWT_CACHE_TTL_SECONDS = 300


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """
    Validate the Supabase JWT and return the current user.

    Args:
        credentials: HTTP Bearer token credentials

    Returns:
        Dictionary with user_id

    Raises:
        HTTPException: If token is invalid or missing
    """
    token = credentials.credentials

    # Check Redis cache first
    token_hash = hashlib.sha256(token.encode()).hexdigest()
    cache_key = f"jwt_valid:{token_hash}"

    try:
        cached = await redis_client.get(cache_key)
        if cached:
            user_data = json.loads(cached)
            logger.debug("JWT validated from cache", extra={"user_id": user_data.get("user_id")})
            return user_data
    except Exception as e:
        logger.warning("Failed to check JWT cache", exc_info=e)

    secret = settings.require("supabase_jwt_secret")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            options={"verify_aud": False}
        )
    except JWTError as e:
        logger.warning("JWT validation failed", exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user_id = payload.get("sub")  # Supabase uses "sub" for user_id
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user_id"
        )

    user_data = {"user_id": user_id}

    try:
        await redis_client.set(cache_key, json.dumps(user_data), ex=JWT_CACHE_TTL_SECONDS)
    except Exception as e:
        logger.warning("Failed to cache JWT", exc_info=e)

    logger.debug("JWT validated successfully", extra={"user_id": user_id})
    return user_data


async def verify_project_ownership(project_id: str, current_user: dict) -> dict:
    """
    Verify that the project belongs to the current user.

    Args:
        project_id: Project ID to verify
        current_user: Current user from get_current_user

    Returns:
        Project row

    Raises:
        HTTPException: 404 if missing, 403 if owned by another user
    """
    try:
        project = await get_project(project_id)
    except Exception as e:
        logger.error("Failed to verify project ownership", exc_info=e, extra={"project_id": project_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify project ownership"
        )

    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )

    if project.get("user_id") != current_user["user_id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Project does not belong to user"
        )

    return project
