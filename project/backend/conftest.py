"""
Fixtures shared by every test package.
"""

import httpx
import pytest
from unittest.mock import AsyncMock

from shared.config import settings


@pytest.fixture
def provider_credentials(monkeypatch):
    """Configure dummy provider credentials on the settings singleton."""
    monkeypatch.setattr(settings, "openai_api_key", "sk-test123456789012345678901234567890")
    monkeypatch.setattr(settings, "replicate_api_token", "r8_test123456789012345678901234567890")
    monkeypatch.setattr(settings, "elevenlabs_api_key", "el_test123456789012345678901234567890")
    monkeypatch.setattr(settings, "supabase_jwt_secret", "test_jwt_secret_123456789012345678901234567890")


@pytest.fixture
def mock_http():
    """
    Build an httpx.AsyncClient backed by a handler function.

    Usage: client = mock_http(lambda request: httpx.Response(200, json={...}))
    """
    def _factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _factory


@pytest.fixture
def mock_project_helpers(monkeypatch):
    """Replace project record writes used by the generation flows."""
    helpers = {
        "mark_processing": AsyncMock(return_value=True),
        "mark_completed": AsyncMock(return_value=True),
        "mark_error": AsyncMock(return_value=True),
    }
    for name, mock in helpers.items():
        monkeypatch.setattr(f"modules.video_flows.common.{name}", mock)
    return helpers


@pytest.fixture
def no_sleep():
    """Sleep replacement that returns immediately and records intervals."""
    return AsyncMock(return_value=None)
