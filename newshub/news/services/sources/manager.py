"""
News Sources Manager - enumerates the providers that have credentials configured
"""

from typing import List, Dict, Optional, Iterable, Type

import httpx
import structlog

from ....config import Settings
from ....core.exceptions import ConfigurationError
from .base import NewsSourceAdapter
from .guardian import GuardianAdapter
from .nytimes import NYTimesAdapter
from .newsorg import NewsOrgAdapter

logger = structlog.get_logger(__name__)

# Registration order is the order sources are fetched and reported in
ADAPTER_CLASSES: List[Type[NewsSourceAdapter]] = [GuardianAdapter, NYTimesAdapter, NewsOrgAdapter]


class NewsSourceManager:
    """
    Holds the configured news source adapters in a fixed order.
    A provider without an API key is left out instead of failing startup.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self.client = client
        self.sources: Dict[str, NewsSourceAdapter] = self._initialize_sources()

    def _initialize_sources(self) -> Dict[str, NewsSourceAdapter]:
        sources = {}

        for adapter_cls in ADAPTER_CLASSES:
            try:
                sources[adapter_cls.key] = adapter_cls(
                    api_key=getattr(self.settings, f"{adapter_cls.key}_api_key"),
                    base_url=getattr(self.settings, f"{adapter_cls.key}_base_url"),
                    timeout=self.settings.news_request_timeout,
                    max_articles=self.settings.news_max_articles_per_source,
                    client=self.client,
                )
                logger.info("news_source_loaded", source=adapter_cls.key, name=adapter_cls.name)
            except ConfigurationError as e:
                logger.info("news_source_not_configured", source=adapter_cls.key, reason=e.message)

        logger.info("news_sources_ready", count=len(sources), sources=list(sources.keys()))
        return sources

    def get_sources(self, only: Optional[Iterable[str]] = None) -> List[NewsSourceAdapter]:
        """Configured adapters in registration order, optionally restricted by key or display name"""
        if not only:
            return list(self.sources.values())

        wanted = {value.lower() for value in only}
        return [
            adapter for key, adapter in self.sources.items()
            if key in wanted or adapter.name.lower() in wanted
        ]

    def get_available_sources(self) -> List[str]:
        return list(self.sources.keys())

    def close(self) -> None:
        for adapter in self.sources.values():
            adapter.close()
