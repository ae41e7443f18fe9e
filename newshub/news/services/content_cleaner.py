"""
Content cleaning utilities for provider payloads
Handles HTML removal and trimming of free-text fields
"""

import re
import html
from typing import Optional

from bs4 import BeautifulSoup
import structlog

logger = structlog.get_logger(__name__)


class ContentCleaner:
    """Utility class for cleaning free-text article fields"""

    @staticmethod
    def clean_html_content(content: Optional[str]) -> str:
        """
        Strip HTML tags and surrounding whitespace

        Args:
            content: Raw text that may contain markup, or None

        Returns:
            Plain text; empty string when there is nothing to clean
        """
        if not content:
            return ""

        if not isinstance(content, str):
            content = str(content)

        if "<" not in content and "&" not in content:
            return content.strip()

        try:
            soup = BeautifulSoup(content, "html.parser")

            for tag in soup(["script", "style"]):
                tag.decompose()

            return soup.get_text().strip()

        except Exception as e:
            logger.warning("html_cleaning_failed", error=str(e))
            return ContentCleaner._simple_html_removal(content)

    @staticmethod
    def _simple_html_removal(content: str) -> str:
        """Simple fallback HTML tag removal"""
        text = re.sub(r'<[^>]+>', '', content)
        return html.unescape(text).strip()
