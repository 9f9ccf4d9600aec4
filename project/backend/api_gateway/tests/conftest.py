"""
Pytest configuration and fixtures for API Gateway tests.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from api_gateway.main import app
from api_gateway.dependencies import get_current_user
from shared.models.scene import Scene

TEST_USER_ID = "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def client():
    """Test client that returns 500 responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def authed_client(client):
    """Test client with authentication bypassed."""
    app.dependency_overrides[get_current_user] = lambda: {"user_id": TEST_USER_ID}
    yield client
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def mock_redis_client():
    """Mock RedisClient wrapper."""
    mock_client = MagicMock()
    mock_client.get = AsyncMock(return_value=None)
    mock_client.set = AsyncMock(return_value=True)
    mock_client.delete = AsyncMock(return_value=True)
    mock_client.set_json = AsyncMock(return_value=True)
    mock_client.get_json = AsyncMock(return_value=None)
    mock_client.health_check = AsyncMock(return_value=True)
    return mock_client


@pytest.fixture
def mock_table():
    """Chainable table query builder whose execute() is awaitable."""
    table = MagicMock()
    for method in ("select", "insert", "update", "eq", "order", "limit", "range"):
        getattr(table, method).return_value = table

    result = MagicMock()
    result.data = []
    result.count = 0
    table.execute = AsyncMock(return_value=result)
    return table


@pytest.fixture
def mock_database_client(mock_table):
    """Mock database client for testing."""
    mock_client = MagicMock()
    mock_client.table = MagicMock(return_value=mock_table)
    mock_client.health_check = AsyncMock(return_value=True)
    return mock_client


@pytest.fixture
def sample_scenes():
    return [
        Scene(text="Wake up.", visuals="Sunrise over a city", style="calm", duration=4),
        Scene(text="Brew.", visuals="Pour-over close-up", style="warm", duration=5),
        Scene(text="Go!", visuals="Runner with a cup", style="energetic", duration=6),
    ]


@pytest.fixture
def sample_project():
    """Sample project row for testing."""
    return {
        "id": "7d9f3c2e-1111-4a4a-9c9c-000000000001",
        "user_id": TEST_USER_ID,
        "title": "Spring launch",
        "type": "prompt_to_video",
        "status": "error",
        "video_data": {},
        "error_message": "Video generation failed",
        "created_at": "2026-03-01T10:00:00+00:00"
    }
