"""News API response schemas"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


# ============================================================================
# Taxonomy
# ============================================================================

class TaxonomyRef(BaseModel):
    """Category, source or author as embedded in an article"""
    id: int
    name: str
    slug: str

    class Config:
        from_attributes = True


class TaxonomyCount(BaseModel):
    """Taxonomy entry for filter lists; id is the slug, as clients filter by it"""
    id: str
    name: str
    slug: str
    count: int


class FilterOptions(BaseModel):
    categories: List[TaxonomyCount] = []
    sources: List[TaxonomyCount] = []
    authors: List[TaxonomyCount] = []


# ============================================================================
# Articles
# ============================================================================

class ArticleSummary(BaseModel):
    """Article as returned in listings and detail views"""
    id: int
    external_id: str
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[TaxonomyRef] = None
    source: Optional[TaxonomyRef] = None
    author: Optional[TaxonomyRef] = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int
    has_more: bool


class ArticlePage(BaseModel):
    """One page of an article listing"""
    articles: List[ArticleSummary]
    pagination: Pagination


class ArticleDetail(BaseModel):
    article: ArticleSummary
    related_articles: List[ArticleSummary] = []


# ============================================================================
# Ingestion
# ============================================================================

class SourceResult(BaseModel):
    """Outcome of one provider within an ingestion run"""
    source: str
    fetched: int = 0
    saved: int = 0
    error: Optional[str] = None


class IngestionResult(BaseModel):
    total_articles: int
    sources: List[SourceResult]
    dry_run: bool = False

    @property
    def total_saved(self) -> int:
        return sum(result.saved for result in self.sources)

    @property
    def failed_sources(self) -> List[str]:
        return [result.source for result in self.sources if result.error]


# ============================================================================
# User Preferences
# ============================================================================

class UserPreferencesResponse(BaseModel):
    """Stored preferences, or the defaults when the user has none yet"""
    id: Optional[int] = None
    user_id: Optional[int] = None
    categories: List[str] = []
    sources: List[str] = []
    authors: List[str] = []
    language: str = "en"
    theme: str = "light"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
