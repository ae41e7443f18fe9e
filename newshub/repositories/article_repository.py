from datetime import datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import or_, insert
from sqlalchemy.orm import Session, Query, joinedload

from ..news.models.article import Article, article_related
from ..news.models.taxonomy import Category, Source, Author
from ..news.schemas.requests import ArticleFilter, SortDirection


class ArticleRepository:
    def __init__(self, db: Session):
        self.db = db

    def exists_by_external_id(self, external_id: str) -> bool:
        return (
            self.db.query(Article.id)
            .filter(Article.external_id == external_id)
            .first()
        ) is not None

    def add(self, article: Article) -> Article:
        """Stage an article and flush so the id is assigned; the caller owns the commit"""
        self.db.add(article)
        self.db.flush()
        return article

    def get_by_id(self, article_id: int) -> Optional[Article]:
        return (
            self.db.query(Article)
            .options(
                joinedload(Article.category),
                joinedload(Article.source),
                joinedload(Article.author),
            )
            .filter(Article.id == article_id)
            .first()
        )

    def get_related(self, article_id: int, limit: int = 3) -> List[Article]:
        return (
            self.db.query(Article)
            .options(
                joinedload(Article.category),
                joinedload(Article.source),
                joinedload(Article.author),
            )
            .join(article_related, article_related.c.related_article_id == Article.id)
            .filter(article_related.c.article_id == article_id)
            .order_by(Article.published_at.desc())
            .limit(limit)
            .all()
        )

    def add_related(self, article_id: int, related_ids: List[int]) -> int:
        values = [
            {"article_id": article_id, "related_article_id": related_id}
            for related_id in related_ids
            if related_id != article_id
        ]
        if not values:
            return 0

        self.db.execute(insert(article_related), values)
        self.db.commit()
        return len(values)

    def build_filtered_query(self, filters: ArticleFilter) -> Query:
        query = self.db.query(Article)

        if filters.q:
            query = query.filter(
                or_(
                    Article.title.icontains(filters.q, autoescape=True),
                    Article.description.icontains(filters.q, autoescape=True),
                    Article.content.icontains(filters.q, autoescape=True),
                )
            )

        # EXISTS per field: any label may match slug or name
        if filters.categories:
            query = query.filter(Article.category.has(
                or_(Category.slug.in_(filters.categories), Category.name.in_(filters.categories))
            ))
        if filters.sources:
            query = query.filter(Article.source.has(
                or_(Source.slug.in_(filters.sources), Source.name.in_(filters.sources))
            ))
        if filters.authors:
            query = query.filter(Article.author.has(
                or_(Author.slug.in_(filters.authors), Author.name.in_(filters.authors))
            ))

        # Inclusive by calendar day of published_at
        if filters.date_from:
            query = query.filter(Article.published_at >= datetime.combine(filters.date_from, time.min))
        if filters.date_to:
            day_after = datetime.combine(filters.date_to + timedelta(days=1), time.min)
            query = query.filter(Article.published_at < day_after)

        return query

    def paginate(self, filters: ArticleFilter) -> Tuple[List[Article], int]:
        query = self.build_filtered_query(filters)
        total = query.order_by(None).count()

        column = getattr(Article, filters.sort_field.value)
        ordering = column.desc() if filters.sort_direction == SortDirection.DESC else column.asc()

        articles = (
            query.options(
                joinedload(Article.category),
                joinedload(Article.source),
                joinedload(Article.author),
            )
            .order_by(ordering)
            .offset((filters.page - 1) * filters.per_page)
            .limit(filters.per_page)
            .all()
        )
        return articles, total
