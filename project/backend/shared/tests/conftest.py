"""
Pytest configuration and fixtures.
"""

import pytest
from unittest.mock import MagicMock

from shared.config import settings


@pytest.fixture
def test_env_file(tmp_path):
    """Create a temporary .env file for testing."""
    env_file = tmp_path / ".env"
    env_content = """
SUPABASE_URL=https://test.supabase.co/
SUPABASE_SERVICE_KEY=test_service_key_1234567890123456789012345678901234567890
REDIS_URL=redis://localhost:6379
OPENAI_API_KEY=sk-test123456789012345678901234567890
REPLICATE_API_TOKEN=r8_test123456789012345678901234567890
ELEVENLABS_API_KEY=el_test123456789012345678901234567890
ENVIRONMENT=development
LOG_LEVEL=DEBUG
"""
    env_file.write_text(env_content)
    return env_file


@pytest.fixture
def openai_key(monkeypatch):
    """Configure a dummy OpenAI key on the settings singleton."""
    monkeypatch.setattr(settings, "openai_api_key", "sk-test123456789012345678901234567890")


@pytest.fixture
def mock_openai_client():
    """OpenAI client whose chat.completions.create is a MagicMock."""
    client = MagicMock()
    client.chat.completions.create = MagicMock()
    return client
