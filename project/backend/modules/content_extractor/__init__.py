"""
Content Extractor Module.

Turns a web page into a {title, description, content, script} record.
"""

from modules.content_extractor.extractor import extract_content, fetch_page, MAX_CONTENT_CHARS

__all__ = [
    "extract_content",
    "fetch_page",
    "MAX_CONTENT_CHARS",
]
