from typing import Any, Dict

import structlog
from fastapi import Depends, Header, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..news.schemas.requests import ArticleFilter
from ..news.services.news_service import NewsService
from ..news.services.personalization_service import PersonalizationService
from ..news.services.taxonomy_service import TaxonomyService
from ..services.cache_service import CacheService
from ..services.preferences_service import PreferencesService

logger = structlog.get_logger(__name__)

LIST_PARAMS = {"categories", "categories[]", "sources", "sources[]", "authors", "authors[]"}


def get_cache_service(request: Request) -> CacheService:
    return request.app.state.cache


def get_news_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service)
) -> NewsService:
    return NewsService(db, cache)


def get_personalization_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service),
    news_service: NewsService = Depends(get_news_service)
) -> PersonalizationService:
    return PersonalizationService(db, cache, news_service)


def get_taxonomy_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service)
) -> TaxonomyService:
    return TaxonomyService(db, cache)


def get_preferences_service(
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache_service)
) -> PreferencesService:
    return PreferencesService(db, cache)


def get_article_filter(request: Request) -> ArticleFilter:
    """Parse listing filters from the query string; repeated keys build label lists"""
    params: Dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values if key in LIST_PARAMS else values[-1]

    try:
        return ArticleFilter.from_params(params)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=[{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()]
        )


def get_current_user_id(x_user_id: int = Header(..., alias="X-User-Id")) -> int:
    """Authentication happens upstream; the gateway forwards the user id"""
    return x_user_id
