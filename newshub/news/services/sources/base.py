"""
Base class for news source adapters
Clean, simple interface that all sources must implement
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from dateutil import parser as date_parser
import httpx
import structlog

from ....core.exceptions import ConfigurationError, ProviderError
from ....utils.string_utils import md5_hex
from ..content_cleaner import ContentCleaner

logger = structlog.get_logger(__name__)


@dataclass
class ArticleDraft:
    """Provider-normalized article, not yet deduplicated or persisted"""
    external_id: str
    title: str
    description: str
    content: str
    url: str
    source_name: str
    category_name: str
    author_name: str
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None


class NewsSourceAdapter(ABC):
    """
    Base adapter for external news APIs.

    Subclasses declare how to call their API (`endpoint`, `build_params`) and
    how to map one raw record (`map_item`); the base class owns the HTTP call,
    error wrapping, dropping incomplete records and the per-source cap.
    """

    key: str = ""
    name: str = ""
    service_label: str = ""
    api_key_setting: str = ""
    external_id_prefix: str = ""
    endpoint: str = ""
    default_label: str = ""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        timeout: float = 30,
        max_articles: int = 50,
        client: Optional[httpx.Client] = None,
    ):
        if not api_key:
            raise ConfigurationError(self.service_label or self.name, self.api_key_setting)

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_articles = max_articles
        self.client = client or httpx.Client(timeout=timeout)

    @abstractmethod
    def build_params(self) -> Dict[str, Any]:
        """Query parameters for the listing request"""
        pass

    @abstractmethod
    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Pull the list of raw records out of the response body"""
        pass

    @abstractmethod
    def map_item(self, item: Dict[str, Any]) -> Optional[ArticleDraft]:
        """Map one raw record to a draft, or None when it lacks essential data"""
        pass

    def fetch_news(self) -> List[ArticleDraft]:
        """Fetch the newest articles from this provider as normalized drafts"""
        url = f"{self.base_url}{self.endpoint}"
        logger.info("provider_fetch_started", provider=self.name, url=url)

        try:
            response = self.client.get(url, params=self.build_params(), timeout=self.timeout)

            if not response.is_success:
                logger.error(
                    "provider_request_failed",
                    provider=self.name,
                    status=response.status_code,
                    body=response.text[:500],
                )
                raise ProviderError(
                    self.service_label or self.name,
                    f"API request failed with status {response.status_code}",
                    response.status_code,
                )

            drafts = self.normalize_response(response.json())

        except ProviderError:
            raise
        except Exception as e:
            logger.error("provider_exception", provider=self.name, error=str(e), exc_info=True)
            raise ProviderError(self.service_label or self.name, str(e), 0) from e

        logger.info("provider_fetch_completed", provider=self.name, drafts=len(drafts))
        return drafts

    def normalize_response(self, payload: Dict[str, Any]) -> List[ArticleDraft]:
        drafts = []
        for item in self.extract_items(payload or {}):
            if len(drafts) >= self.max_articles:
                break

            draft = self.map_item(item)
            if draft is None:
                continue
            drafts.append(draft)

        return drafts

    def generate_external_id(self, natural_key: str) -> str:
        return f"{self.external_id_prefix}_{md5_hex(natural_key)}"

    @staticmethod
    def clean_text(text: Optional[str]) -> str:
        return ContentCleaner.clean_html_content(text)

    def parse_date(self, value: Optional[str]) -> Optional[datetime]:
        """Parse a provider timestamp to naive UTC; None when absent or unparseable"""
        if not value:
            return None

        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError, TypeError):
            logger.warning("provider_date_unparseable", provider=self.name, date=value)
            return None

        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed.replace(microsecond=0)

    def close(self) -> None:
        self.client.close()

    def __repr__(self):
        return f"<{self.__class__.__name__}(name='{self.name}')>"
