"""
Structured logging.

JSON log lines with request/job correlation IDs for every module.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shared.config import settings

SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization")

# Standard LogRecord attributes that are not "extra" fields
_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "message", "taskName",
}

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

_configured = False


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def _sanitize(value: Any) -> Any:
    """Redact secret-looking keys in nested dicts."""
    if isinstance(value, dict):
        return {
            k: "***" if _is_sensitive_key(str(k)) else _sanitize(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_sanitize(v) for v in value]
    return value


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        job_id = job_id_var.get()
        if job_id:
            log_data["job_id"] = job_id

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        # Anything passed through logger.info(..., extra={...})
        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_") and not callable(value)
        }
        if extra:
            log_data["extra"] = _sanitize(extra)

        return json.dumps(log_data, default=str)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install the JSON handler on the root logger.

    Args:
        level: Log level name (defaults to settings.log_level)
    """
    global _configured

    root = logging.getLogger()
    root.setLevel(level or settings.log_level)

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)

    # Provider SDKs are chatty at INFO
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that writes structured JSON lines.

    Args:
        name: Logger name (usually __name__ or a module name)

    Returns:
        Configured logger
    """
    configure_logging()
    return logging.getLogger(name)


def set_request_id(request_id: Optional[str]) -> None:
    """Attach a request ID to all log lines in the current context."""
    request_id_var.set(request_id)


def set_job_id(job_id: Optional[Any]) -> None:
    """Attach a job/project ID to all log lines in the current context."""
    job_id_var.set(str(job_id) if job_id is not None else None)
