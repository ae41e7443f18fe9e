from fastapi import APIRouter

from .endpoints import news, taxonomy, user, cache

api_router = APIRouter()

api_router.include_router(news.router, tags=["news"])
api_router.include_router(taxonomy.router, tags=["taxonomy"])
api_router.include_router(user.router, prefix="/user", tags=["user"])

# Administrative cache clear; keep behind the gateway's admin auth
api_router.include_router(cache.router, tags=["admin"])
