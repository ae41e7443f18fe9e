from fastapi import APIRouter, Depends, HTTPException, Query
import structlog

from ...dependencies import get_cache_service
from ....services.cache_service import CACHE_TYPES, CacheService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.delete("/cache")
async def clear_cache(
    type: str = Query("all", description="categories, sources, authors, filter_options, articles, personalized_feed or all"),
    cache: CacheService = Depends(get_cache_service)
):
    if type != "all" and type not in CACHE_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown cache type: {type}")

    cleared = cache.clear_type(type)
    logger.info("cache_cleared_via_api", cache_type=type)
    return {"success": True, "cleared": cleared}
