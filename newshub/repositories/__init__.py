from .article_repository import ArticleRepository
from .taxonomy_repository import TaxonomyRepository
from .preferences_repository import PreferencesRepository

__all__ = ["ArticleRepository", "TaxonomyRepository", "PreferencesRepository"]
