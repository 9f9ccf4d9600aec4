"""
Shared HTTP client.

One httpx.AsyncClient reused across requests to web pages and AI providers.
"""

from typing import Optional

import httpx

from shared.config import settings

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Lazy-init the shared async HTTP client."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds, connect=10.0),
            follow_redirects=True
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared client (application shutdown)."""
    global _http_client
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None
