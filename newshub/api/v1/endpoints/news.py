from fastapi import APIRouter, Depends
import structlog

from ...dependencies import (
    get_article_filter,
    get_current_user_id,
    get_news_service,
    get_personalization_service,
)
from ....core.exceptions import ArticleNotFoundError
from ....news.schemas.requests import ArticleFilter
from ....news.schemas.responses import ArticleDetail, ArticlePage
from ....news.services.news_service import NewsService
from ....news.services.personalization_service import PersonalizationService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/news", response_model=ArticlePage)
async def get_news_list(
    filters: ArticleFilter = Depends(get_article_filter),
    news_service: NewsService = Depends(get_news_service)
):
    """
    Paginated article listing.

    Query parameters: q, categories[] / categories, sources[], authors[],
    date_from, date_to, page, per_page and sort (e.g. "-published_at").
    """
    return news_service.paginate(filters)


@router.get("/news/{article_id}", response_model=ArticleDetail)
async def get_news_detail(
    article_id: int,
    news_service: NewsService = Depends(get_news_service)
):
    """Single article with up to three related articles"""
    detail = news_service.find_by_id_with_related(article_id)
    if detail is None:
        raise ArticleNotFoundError(article_id)
    return detail


@router.get("/personalized-feed", response_model=ArticlePage)
async def get_personalized_feed(
    user_id: int = Depends(get_current_user_id),
    filters: ArticleFilter = Depends(get_article_filter),
    personalization: PersonalizationService = Depends(get_personalization_service)
):
    return personalization.get_personalized_feed(user_id, filters)
