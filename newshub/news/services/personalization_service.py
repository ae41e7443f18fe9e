"""
Personalized feed composition
Stored user preferences replace the request's taxonomy filters
"""

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.exceptions import StorageError
from ...repositories.preferences_repository import PreferencesRepository
from ...services.cache_service import CacheService, stable_params_hash
from ..schemas.requests import ArticleFilter, UserPreferencesData
from ..schemas.responses import ArticlePage
from .news_service import NewsService

logger = structlog.get_logger(__name__)


class PersonalizationService:
    def __init__(self, db: Session, cache: CacheService, news_service: NewsService):
        self.db = db
        self.cache = cache
        self.news_service = news_service
        self.preferences = PreferencesRepository(db)

    def get_personalized_feed(self, user_id: int, filters: ArticleFilter) -> ArticlePage:
        """
        Listing for one user.

        Without stored categories/sources/authors this is exactly the public
        listing for the same filters. Otherwise the stored lists replace the
        request's lists (an empty stored list means no filter on that field)
        and the page is cached per user.
        """
        stored = self._load_preferences(user_id)
        if stored is None or not stored.has_filters():
            logger.debug("personalized_feed_fallback", user_id=user_id)
            return self.news_service.paginate(filters)

        effective = filters.model_copy(update={
            "categories": stored.categories,
            "sources": stored.sources,
            "authors": stored.authors,
        })

        cache_key = f"personalized_feed:{self.feed_cache_hash(user_id, effective)}"
        data = self.cache.remember(
            cache_key,
            lambda: self.news_service.build_page(effective).model_dump(mode="json"),
        )
        return ArticlePage.model_validate(data)

    @staticmethod
    def feed_cache_hash(user_id: int, filters: ArticleFilter) -> str:
        return stable_params_hash({"user_id": user_id, **filters.cache_params()})

    def _load_preferences(self, user_id: int):
        try:
            record = self.preferences.get_by_user_id(user_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Preference storage unavailable: {e}") from e

        if record is None or not record.preferences:
            return None
        return UserPreferencesData.model_validate(record.preferences)
