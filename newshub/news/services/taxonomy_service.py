"""Category, source and author listings used to build filter menus"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.exceptions import StorageError
from ...repositories.taxonomy_repository import TaxonomyRepository
from ...services.cache_service import CacheService
from ..schemas.responses import FilterOptions, TaxonomyCount

LIST_LIMIT = 10


class TaxonomyService:
    def __init__(self, db: Session, cache: CacheService):
        self.db = db
        self.cache = cache
        self.repository = TaxonomyRepository(db)

    def get_categories(self, q: Optional[str] = None) -> List[TaxonomyCount]:
        return self._list("categories", q)

    def get_sources(self, q: Optional[str] = None) -> List[TaxonomyCount]:
        return self._list("sources", q)

    def get_authors(self, q: Optional[str] = None) -> List[TaxonomyCount]:
        return self._list("authors", q)

    def get_filter_options(self, q: Optional[str] = None) -> FilterOptions:
        cache_key = f"filter_options:search:{q}" if q else "filter_options"

        def compute():
            options = FilterOptions(
                categories=self.get_categories(q),
                sources=self.get_sources(q),
                authors=self.get_authors(q),
            )
            return options.model_dump(mode="json")

        return FilterOptions.model_validate(self.cache.remember(cache_key, compute))

    def _list(self, kind: str, q: Optional[str]) -> List[TaxonomyCount]:
        q = q.strip() if q else None
        cache_key = f"{kind}:search:{q}" if q else kind

        def compute():
            try:
                rows = self.repository.list_with_counts(kind, q=q, limit=LIST_LIMIT)
            except SQLAlchemyError as e:
                raise StorageError(f"Taxonomy storage unavailable: {e}") from e

            return [
                {"id": entity.slug, "name": entity.name, "slug": entity.slug, "count": count}
                for entity, count in rows
            ]

        return [TaxonomyCount.model_validate(item) for item in self.cache.remember(cache_key, compute)]
