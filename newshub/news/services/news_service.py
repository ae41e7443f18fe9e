"""
Read-only News Service for API endpoints
Filtered, sorted and paginated article views over the store, read through the cache
"""

import math
from typing import Callable, List, Optional, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import get_settings
from ...core.exceptions import StorageError
from ...repositories.article_repository import ArticleRepository
from ...services.cache_service import CacheService, stable_params_hash
from ..models.article import Article
from ..schemas.requests import ArticleFilter
from ..schemas.responses import ArticleDetail, ArticlePage, ArticleSummary, Pagination

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class NewsService:
    """Read-only news service; every public read goes through the cache"""

    def __init__(self, db: Session, cache: CacheService, related_limit: Optional[int] = None):
        self.db = db
        self.cache = cache
        self.articles = ArticleRepository(db)
        self.related_limit = related_limit if related_limit is not None else get_settings().related_articles_limit

    def paginate(self, filters: ArticleFilter) -> ArticlePage:
        cache_key = f"articles:list:{stable_params_hash(filters.cache_params())}"
        data = self.cache.remember(
            cache_key,
            lambda: self.build_page(filters).model_dump(mode="json"),
        )
        return ArticlePage.model_validate(data)

    def build_page(self, filters: ArticleFilter) -> ArticlePage:
        """Run the listing query without the cache"""
        articles, total = self._read(lambda: self.articles.paginate(filters))

        last_page = max(1, math.ceil(total / filters.per_page))
        return ArticlePage(
            articles=[self._to_summary(article) for article in articles],
            pagination=Pagination(
                current_page=filters.page,
                per_page=filters.per_page,
                total=total,
                last_page=last_page,
                has_more=filters.page < last_page,
            ),
        )

    def find_by_id(self, article_id: int) -> Optional[ArticleSummary]:
        data = self.cache.remember(
            f"articles:single:{article_id}",
            lambda: self._dump(self._read(lambda: self.articles.get_by_id(article_id))),
        )
        return ArticleSummary.model_validate(data) if data is not None else None

    def find_by_id_with_related(self, article_id: int) -> Optional[ArticleDetail]:
        """Article plus at most `related_limit` related articles, newest first"""
        def compute():
            article = self._read(lambda: self.articles.get_by_id(article_id))
            if article is None:
                return None

            related = self._read(lambda: self.articles.get_related(article_id, self.related_limit))
            detail = ArticleDetail(
                article=self._to_summary(article),
                related_articles=[self._to_summary(item) for item in related[:self.related_limit]],
            )
            return detail.model_dump(mode="json")

        data = self.cache.remember(f"articles:with_related:{article_id}", compute)
        return ArticleDetail.model_validate(data) if data is not None else None

    def _read(self, query: Callable[[], T]) -> T:
        try:
            return query()
        except SQLAlchemyError as e:
            logger.error("article_read_failed", error=str(e), exc_info=True)
            raise StorageError(f"Article storage unavailable: {e}") from e

    @staticmethod
    def _to_summary(article: Article) -> ArticleSummary:
        return ArticleSummary.model_validate(article)

    def _dump(self, article: Optional[Article]):
        if article is None:
            return None
        return self._to_summary(article).model_dump(mode="json")
