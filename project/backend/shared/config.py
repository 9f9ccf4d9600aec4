"""
Configuration management.

Centralized environment variable management and validation.
"""

from typing import Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore"
    )

    # Supabase configuration (database + object storage)
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    supabase_jwt_secret: Optional[str] = None  # Supabase JWT secret for token validation

    # Redis configuration
    redis_url: str = "redis://localhost:6379/0"

    # API keys. Optional at start-up; handlers call require() before using them.
    openai_api_key: Optional[str] = None
    replicate_api_token: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None

    # Provider settings
    openai_model: str = "gpt-5-mini-2025-08-07"
    openai_vision_model: str = "gpt-4o-mini"
    openai_image_model: str = "dall-e-3"
    openai_image_size: str = "1792x1024"
    replicate_base_url: str = "https://api.replicate.com/v1"
    replicate_scene_model_version: str = (
        "4d1b8dd8e538e5c7f4a5e6c6e5f5e5f5e5f5e5f5e5f5e5f5e5f5e5f5e5f5e5f5"  # CogVideoX
    )
    replicate_ugc_model_version: str = (
        "9f747673945c62801b13b84701c783929c0ee784e4748ec062204894dda1a351"
    )
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    http_timeout_seconds: float = 60.0

    # Polling
    scene_poll_interval_seconds: float = 3.0
    scene_poll_max_attempts: int = 100  # ~5 minutes at 3s
    render_poll_interval_seconds: float = 5.0
    render_poll_max_attempts: int = 60

    # Storage buckets
    voiceover_bucket: str = "voiceovers"

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate Supabase URL format."""
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ConfigError("SUPABASE_URL must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    @field_validator("supabase_service_key")
    @classmethod
    def validate_supabase_service_key(cls, v: Optional[str]) -> Optional[str]:
        """Validate Supabase service key format."""
        if not v:
            return None
        if len(v) < 50:  # Basic format check
            raise ConfigError("SUPABASE_SERVICE_KEY appears to be invalid")
        return v

    @field_validator("supabase_jwt_secret")
    @classmethod
    def validate_supabase_jwt_secret(cls, v: Optional[str]) -> Optional[str]:
        """Validate Supabase JWT secret format."""
        if not v:
            return None
        if len(v) < 32:
            raise ConfigError("SUPABASE_JWT_SECRET must be at least 32 characters")
        return v

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """Validate Redis URL format."""
        if not v.startswith(("redis://", "rediss://")):
            raise ConfigError("REDIS_URL must start with redis:// or rediss://")
        return v

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Validate OpenAI API key format."""
        if not v:
            return None
        if not v.startswith("sk-"):
            raise ConfigError("OPENAI_API_KEY must start with 'sk-'")
        if len(v) < 20:
            raise ConfigError("OPENAI_API_KEY appears to be invalid")
        return v

    @field_validator("replicate_api_token")
    @classmethod
    def validate_replicate_api_token(cls, v: Optional[str]) -> Optional[str]:
        """Validate Replicate API token format."""
        if not v:
            return None
        if not v.startswith("r8_"):
            raise ConfigError("REPLICATE_API_TOKEN must start with 'r8_'")
        if len(v) < 20:
            raise ConfigError("REPLICATE_API_TOKEN appears to be invalid")
        return v

    @field_validator("elevenlabs_api_key")
    @classmethod
    def validate_elevenlabs_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Validate ElevenLabs API key format."""
        if not v:
            return None
        if len(v) < 20:
            raise ConfigError("ELEVENLABS_API_KEY appears to be invalid")
        return v

    def require(self, name: str) -> str:
        """
        Return a credential, failing if it is not configured.

        Args:
            name: Settings attribute name (e.g. "openai_api_key")

        Returns:
            The configured value

        Raises:
            ConfigError: If the value is missing
        """
        value = getattr(self, name, None)
        if not value:
            raise ConfigError(
                f"{name.upper()} not configured. Please add it to the server environment.",
                code="CONFIG_ERROR"
            )
        return value


# Singleton instance
try:
    settings = Settings()
except Exception as e:
    # Re-raise as ConfigError for consistency
    if isinstance(e, ConfigError):
        raise
    raise ConfigError(f"Failed to load configuration: {str(e)}") from e
