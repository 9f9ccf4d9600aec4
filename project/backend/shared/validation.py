"""
Validation utilities.

Shared validation utilities for request fields.
"""

from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from shared.errors import ValidationError


def is_blank(value: Any) -> bool:
    """True for None, empty strings and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(fields: Dict[str, Any]) -> None:
    """
    Require every named field to be present and non-blank.

    Args:
        fields: Mapping of wire field name to value

    Raises:
        ValidationError: Listing the missing fields
    """
    missing = [name for name, value in fields.items() if is_blank(value)]
    if not missing:
        return

    if len(missing) == 1:
        names = missing[0]
    else:
        names = ", ".join(missing[:-1]) + f", and {missing[-1]}"
    raise ValidationError(f"Missing required fields: {names}")


def validate_url(url: Optional[str]) -> str:
    """
    Validate an absolute HTTP(S) URL.

    Args:
        url: URL string to validate

    Returns:
        The stripped URL

    Raises:
        ValidationError: If the URL is missing or does not parse
    """
    if is_blank(url):
        raise ValidationError("URL is required")

    if not isinstance(url, str):
        raise ValidationError("URL must be a string")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValidationError(f"Invalid URL format: {str(e)}") from e

    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationError("Invalid URL format")

    return url


def validate_exclusive_text(
    prompt: Optional[str],
    script: Optional[str]
) -> Tuple[str, str]:
    """
    Validate that exactly one of prompt/script is supplied.

    Args:
        prompt: Free-text prompt
        script: Ready-made script

    Returns:
        Tuple of (kind, text) where kind is "prompt" or "script"

    Raises:
        ValidationError: If both or neither are supplied
    """
    has_prompt = not is_blank(prompt)
    has_script = not is_blank(script)

    if not has_prompt and not has_script:
        raise ValidationError("Either prompt or script is required")
    if has_prompt and has_script:
        raise ValidationError("Provide either prompt or script, not both")

    if has_script:
        return "script", script.strip()
    return "prompt", prompt.strip()
