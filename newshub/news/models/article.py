from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...core.database import Base
from .taxonomy import Category, Source, Author  # noqa: F401  (registers mapped classes)

# Self-referential association, populated out of band of ingestion
article_related = Table(
    "article_related",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("article_id", Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
    Column("related_article_id", Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
    Column("created_at", DateTime, default=func.now()),
    UniqueConstraint("article_id", "related_article_id", name="uq_article_related_pair"),
)


class Article(Base):
    """
    Canonical article row produced by ingestion.
    external_id is provider-namespaced and unique across the store.
    """
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(255), nullable=False, unique=True)

    title = Column(String(500), nullable=False)
    description = Column(Text)
    content = Column(Text)
    url = Column(String(1000))
    image_url = Column(String(1000))

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    source_id = Column(Integer, ForeignKey("sources.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="CASCADE"), nullable=False)

    published_at = Column(DateTime)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="articles")
    source = relationship("Source", back_populates="articles")
    author = relationship("Author", back_populates="articles")
    related_articles = relationship(
        "Article",
        secondary=article_related,
        primaryjoin=id == article_related.c.article_id,
        secondaryjoin=id == article_related.c.related_article_id,
        order_by="Article.published_at.desc()",
    )

    __table_args__ = (
        Index("idx_articles_published_at", "published_at"),
        Index("idx_articles_category_published", "category_id", "published_at"),
        Index("idx_articles_source_published", "source_id", "published_at"),
        Index("idx_articles_author_published", "author_id", "published_at"),
    )

    def __repr__(self):
        return f"<Article(id={self.id}, external_id='{self.external_id}', title='{self.title[:50]}...')>"
