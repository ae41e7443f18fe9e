from .taxonomy import Category, Source, Author
from .article import Article, article_related

__all__ = ["Category", "Source", "Author", "Article", "article_related"]
