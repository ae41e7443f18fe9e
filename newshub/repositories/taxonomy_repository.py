from typing import List, Optional, Tuple, Type, Union

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..news.models.article import Article
from ..news.models.taxonomy import Category, Source, Author
from ..utils.string_utils import md5_hex, slugify

logger = structlog.get_logger(__name__)

TaxonomyModel = Union[Category, Source, Author]

TAXONOMY_MODELS = {
    "categories": (Category, Article.category_id),
    "sources": (Source, Article.source_id),
    "authors": (Author, Article.author_id),
}


def taxonomy_slug(name: Optional[str]) -> str:
    """
    Slug used as the get-or-create key. Names with no ASCII letters or digits
    (e.g. "山田太郎") get a short digest of the trimmed name instead.
    """
    slug = slugify(name)
    if slug:
        return slug

    name = (name or "").strip()
    if not name:
        raise ValueError("Cannot derive a slug from an empty name")
    return md5_hex(name)[:12]


class TaxonomyRepository:
    """Categories, sources and authors share one shape; every lookup is by slug."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_slug(self, model: Type[TaxonomyModel], slug: str) -> Optional[TaxonomyModel]:
        return self.db.query(model).filter(model.slug == slug).first()

    def get_or_create(self, model: Type[TaxonomyModel], name: str) -> Tuple[TaxonomyModel, bool]:
        """
        Resolve an entity by the slug of its display name, creating it if absent.

        The insert runs in its own savepoint; if a concurrent writer created the
        same slug first, the unique constraint fires and the existing row is read back.

        Returns:
            (entity, created)
        """
        slug = taxonomy_slug(name)

        entity = self.get_by_slug(model, slug)
        if entity is not None:
            return entity, False

        try:
            with self.db.begin_nested():
                entity = model(name=name.strip(), slug=slug)
                self.db.add(entity)
                self.db.flush()
        except IntegrityError:
            logger.info("taxonomy_slug_conflict_retry", model=model.__tablename__, slug=slug)
            entity = self.get_by_slug(model, slug)
            if entity is None:
                raise
            return entity, False

        return entity, True

    def list_with_counts(self, kind: str, q: Optional[str] = None, limit: int = 10) -> List[Tuple[TaxonomyModel, int]]:
        model, foreign_key = TAXONOMY_MODELS[kind]

        query = (
            self.db.query(model, func.count(Article.id))
            .outerjoin(Article, foreign_key == model.id)
            .group_by(model.id)
        )
        if q:
            query = query.filter(model.name.icontains(q, autoescape=True))

        return query.order_by(model.name.asc()).limit(limit).all()
