"""
Website content extraction.

Fetch a page and have the LLM summarize it into a video-ready record.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from shared.errors import UpstreamFetchError
from shared.http_client import get_http_client
from shared.llm import complete_json
from shared.logging import get_logger, set_job_id
from shared.projects import save_draft
from shared.validation import validate_url

logger = get_logger("content_extractor")

MAX_CONTENT_CHARS = 8000

USER_AGENT = "Mozilla/5.0 (compatible; SmartReelBot/1.0; +https://smartreel.app/bot)"

SYSTEM_PROMPT = """You are a content strategist who turns web pages into short-form video material.

You receive the raw HTML or text of a web page. Extract what matters to a viewer and return ONLY valid JSON in this exact format:
{
  "title": "Page or product title",
  "description": "One or two sentence summary",
  "content": "The key information from the page in plain prose",
  "script": "A 30-60 second narration script for a short video about this page"
}"""


async def fetch_page(url: str) -> str:
    """
    Fetch a page body without rendering it.

    Args:
        url: Absolute URL

    Returns:
        Response text

    Raises:
        UpstreamFetchError: On transport errors or non-2xx responses
    """
    client = get_http_client()
    try:
        response = await client.get(url, headers={"User-Agent": USER_AGENT})
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Failed to fetch {url}: {str(e)}") from e

    if not response.is_success:
        raise UpstreamFetchError(
            f"Failed to fetch {url}: HTTP {response.status_code}",
            status_code=response.status_code
        )
    return response.text


async def extract_content(url: str, project_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Extract a {title, description, content, script} record from a URL.

    Args:
        url: Absolute http(s) URL
        project_id: Optional project to store the record on (as a draft)

    Returns:
        Extracted record with `images` and `url` added

    Raises:
        ValidationError: If the URL does not parse
        UpstreamFetchError: If the page cannot be fetched
        UpstreamAIError: If the summarization call fails
    """
    url = validate_url(url)
    if project_id:
        set_job_id(project_id)

    logger.info(f"Scraping URL: {url}")
    body = await fetch_page(url)
    excerpt = body[:MAX_CONTENT_CHARS]

    summary = await complete_json(
        SYSTEM_PROMPT,
        f"URL: {url}\n\nPage content:\n{excerpt}"
    )

    record = {
        "title": summary.get("title") or urlparse(url).hostname,
        "description": summary.get("description") or "",
        "content": summary.get("content") or "",
        "script": summary.get("script") or "",
        "images": [],  # image extraction is not implemented
        "url": url,
    }

    if project_id:
        await save_draft(project_id, record)

    logger.info(f"Successfully scraped {url}", extra={"excerpt_chars": len(excerpt)})
    return record
