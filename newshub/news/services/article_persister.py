"""
Article Persister
Writes normalized drafts to the store, one transaction per batch
"""

from typing import List

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.exceptions import PersistenceSkip
from ...repositories.article_repository import ArticleRepository
from ...repositories.taxonomy_repository import TaxonomyRepository
from ...services.cache_service import CacheService
from ..models.article import Article
from ..models.taxonomy import Category, Source, Author
from .sources.base import ArticleDraft

logger = structlog.get_logger(__name__)

TAXONOMY_CACHE_GROUPS = ("categories", "sources", "authors", "filter_options")
LISTING_CACHE_PREFIXES = ("articles:", "personalized_feed:")


class ArticlePersister:
    """
    Deduplicates drafts by external_id, resolves taxonomy by slug and inserts
    the rest. Each draft is written inside its own savepoint so a failing
    record is rolled back alone and the batch carries on.
    """

    def __init__(self, db: Session, cache: CacheService):
        self.db = db
        self.cache = cache
        self.articles = ArticleRepository(db)
        self.taxonomy = TaxonomyRepository(db)

    def save(self, drafts: List[ArticleDraft]) -> int:
        """Persist a batch of drafts and return how many new articles were inserted"""
        if not drafts:
            return 0

        saved = 0
        skipped = 0

        try:
            for draft in drafts:
                try:
                    self._save_one(draft)
                    saved += 1
                except PersistenceSkip as skip:
                    skipped += 1
                    logger.debug("article_skipped", external_id=skip.external_id, reason=skip.reason)
        except Exception:
            # Nothing from a failed batch may leak into the next commit on this session
            self.db.rollback()
            logger.error("article_batch_failed", drafts=len(drafts), saved_before_failure=saved, exc_info=True)
            raise

        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("article_batch_commit_failed", drafts=len(drafts), exc_info=True)
            raise

        logger.info("article_batch_saved", received=len(drafts), saved=saved, skipped=skipped)

        if saved > 0:
            self.invalidate_caches()

        return saved

    def _save_one(self, draft: ArticleDraft) -> Article:
        if self.articles.exists_by_external_id(draft.external_id):
            raise PersistenceSkip(draft.external_id, "duplicate external_id")

        try:
            with self.db.begin_nested():
                category, _ = self.taxonomy.get_or_create(Category, draft.category_name)
                source, _ = self.taxonomy.get_or_create(Source, draft.source_name)
                author, _ = self.taxonomy.get_or_create(Author, draft.author_name)

                article = Article(
                    external_id=draft.external_id,
                    title=draft.title,
                    description=draft.description,
                    content=draft.content,
                    url=draft.url,
                    image_url=draft.image_url,
                    published_at=draft.published_at,
                    category_id=category.id,
                    source_id=source.id,
                    author_id=author.id,
                )
                return self.articles.add(article)

        except (SQLAlchemyError, ValueError) as e:
            logger.warning(
                "article_save_failed",
                external_id=draft.external_id,
                title=draft.title,
                error=str(e),
            )
            raise PersistenceSkip(draft.external_id, str(e)) from e

    def invalidate_caches(self) -> None:
        """Taxonomy counts and every listing may have changed"""
        for group in TAXONOMY_CACHE_GROUPS:
            self.cache.forget_group(group)
        for prefix in LISTING_CACHE_PREFIXES:
            self.cache.forget_by_prefix(prefix)
        logger.info("article_caches_invalidated")
