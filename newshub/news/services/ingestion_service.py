"""
Ingestion Orchestrator
Fetches every configured provider and hands each batch to the persister.

Fetching may run on a small thread pool; persisting is always sequential in
provider registration order so get-or-create by slug never races itself.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import structlog

from ...core.exceptions import ProviderError
from ..schemas.responses import IngestionResult, SourceResult
from .article_persister import ArticlePersister
from .sources.base import ArticleDraft, NewsSourceAdapter

logger = structlog.get_logger(__name__)


@dataclass
class FetchOutcome:
    """Result of one provider fetch: either drafts or an error message"""
    source: str
    drafts: List[ArticleDraft] = field(default_factory=list)
    error: Optional[str] = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class IngestionOrchestrator:
    def __init__(
        self,
        sources: Sequence[NewsSourceAdapter],
        persister: ArticlePersister,
        max_workers: int = 1,
    ):
        self.sources = list(sources)
        self.persister = persister
        self.max_workers = max(1, max_workers)

    def run_all(self, only: Optional[Sequence[str]] = None, dry_run: bool = False) -> IngestionResult:
        """
        Run one ingestion sweep.

        Args:
            only: Restrict the run to these provider keys or display names
            dry_run: Fetch and normalize but never touch the store or the cache

        Returns:
            Per-source breakdown; never raises for a provider failure
        """
        sources = self._select(only)
        started = time.monotonic()
        logger.info(
            "ingestion_started",
            sources=[source.name for source in sources],
            dry_run=dry_run,
            workers=self.max_workers,
        )

        outcomes = self._fetch_all(sources)

        results: List[SourceResult] = []
        for outcome in outcomes:
            if not outcome.ok:
                results.append(SourceResult(source=outcome.source, fetched=0, saved=0, error=outcome.error))
                continue

            try:
                saved = 0 if dry_run else self.persister.save(outcome.drafts)
            except Exception as e:
                logger.error("ingestion_persist_failed", source=outcome.source, error=str(e), exc_info=True)
                results.append(SourceResult(
                    source=outcome.source,
                    fetched=len(outcome.drafts),
                    saved=0,
                    error=f"Persisting failed: {e}",
                ))
                continue

            results.append(SourceResult(source=outcome.source, fetched=len(outcome.drafts), saved=saved))

            logger.info(
                "ingestion_source_completed",
                source=outcome.source,
                fetched=len(outcome.drafts),
                saved=saved,
                fetch_seconds=round(outcome.duration, 3),
            )

        result = IngestionResult(
            total_articles=sum(r.fetched for r in results),
            sources=results,
            dry_run=dry_run,
        )

        logger.info(
            "ingestion_completed",
            total_articles=result.total_articles,
            total_saved=result.total_saved,
            failed_sources=result.failed_sources,
            duration_seconds=round(time.monotonic() - started, 3),
        )
        return result

    def _select(self, only: Optional[Sequence[str]]) -> List[NewsSourceAdapter]:
        if not only:
            return list(self.sources)

        wanted = {name.strip().lower() for name in only}
        return [
            source for source in self.sources
            if source.key.lower() in wanted or source.name.lower() in wanted
        ]

    def _fetch_all(self, sources: List[NewsSourceAdapter]) -> List[FetchOutcome]:
        """Outcomes come back in the same order as sources"""
        if self.max_workers == 1 or len(sources) <= 1:
            return [self._fetch_one(source) for source in sources]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(sources))) as pool:
            futures = [pool.submit(self._fetch_one, source) for source in sources]
            return [future.result() for future in futures]

    def _fetch_one(self, source: NewsSourceAdapter) -> FetchOutcome:
        started = time.monotonic()
        try:
            drafts = source.fetch_news()
        except ProviderError as e:
            logger.warning("ingestion_source_failed", source=source.name, error=e.message)
            return FetchOutcome(source=source.name, error=e.message, duration=time.monotonic() - started)
        except Exception as e:
            wrapped = ProviderError(source.service_label or source.name, str(e), 0)
            logger.error("ingestion_source_crashed", source=source.name, error=wrapped.message, exc_info=True)
            return FetchOutcome(source=source.name, error=wrapped.message, duration=time.monotonic() - started)

        return FetchOutcome(source=source.name, drafts=drafts, duration=time.monotonic() - started)
