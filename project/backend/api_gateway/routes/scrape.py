"""
Website scraping endpoint.
"""

from fastapi import APIRouter

from shared.logging import get_logger
from shared.models.requests import ScrapeWebsiteRequest

from modules.content_extractor import extract_content

logger = get_logger(__name__)

router = APIRouter()


@router.post("/scrape-website")
async def scrape_website(body: ScrapeWebsiteRequest):
    """
    Extract structured marketing content from a web page.

    Returns:
        {success, data} where data holds title, description, content,
        script, images and url
    """
    data = await extract_content(body.url, project_id=body.project_id)
    return {"success": True, "data": data}
