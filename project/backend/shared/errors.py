"""
Error handling.

Custom exception classes for consistent error handling across the handlers.
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for all generation errors."""

    def __init__(
        self,
        message: str,
        job_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        """
        Initialize pipeline error.

        Args:
            message: Error message
            job_id: Optional job/project ID associated with the error
            code: Optional error code for categorization
        """
        self.message = message
        self.job_id = job_id
        self.code = code
        super().__init__(self.message)


class ConfigError(PipelineError):
    """Configuration errors (missing API keys, invalid settings)."""
    pass


class ValidationError(PipelineError):
    """Input validation errors (missing or malformed request fields)."""
    pass


class UpstreamFetchError(PipelineError):
    """Network-level failure reaching a third party."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        job_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        """
        Initialize upstream fetch error.

        Args:
            message: Error message
            status_code: HTTP status returned by the remote host, if any
            job_id: Optional job/project ID associated with the error
            code: Optional error code for categorization
        """
        self.status_code = status_code
        super().__init__(message, job_id, code)


class UpstreamAIError(PipelineError):
    """An AI provider responded, but with an error."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    QUOTA = "quota"
    MALFORMED = "malformed"
    PROVIDER = "provider"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        kind: str = PROVIDER,
        provider: Optional[str] = None,
        job_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        """
        Initialize upstream AI error.

        Args:
            message: Error message surfaced to the caller
            status_code: HTTP status to mirror back (provider status where known)
            kind: One of auth, rate_limit, quota, malformed, provider
            provider: Provider name (openai, replicate, elevenlabs)
            job_id: Optional job/project ID associated with the error
            code: Optional error code for categorization
        """
        self.status_code = status_code
        self.kind = kind
        self.provider = provider
        super().__init__(message, job_id, code)


class GenerationTimeoutError(PipelineError):
    """A bounded wait loop exhausted its attempt ceiling."""

    def __init__(
        self,
        message: str,
        attempts: Optional[int] = None,
        job_id: Optional[str] = None,
        code: Optional[str] = None
    ):
        self.attempts = attempts
        super().__init__(message, job_id, code)


__all__ = [
    "PipelineError",
    "ConfigError",
    "ValidationError",
    "UpstreamFetchError",
    "UpstreamAIError",
    "GenerationTimeoutError",
]
