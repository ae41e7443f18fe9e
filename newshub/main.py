import structlog
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.v1.router import api_router
from .config import get_settings
from .core.cache_store import build_cache_store
from .core.database import create_tables
from .core.exceptions import (
    NewsHubError,
    ArticleNotFoundError,
    ConfigurationError,
    ProviderError,
    StorageError,
)
from .core.logging_config import configure_logging
from .services.cache_service import CacheService

settings = get_settings()

configure_logging(settings)

logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES = {
    ArticleNotFoundError: 404,
    ConfigurationError: 500,
    ProviderError: 503,
    StorageError: 503,
}


def status_code_for(exc: NewsHubError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting NewsHub API", version=__version__)
    try:
        create_tables()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down NewsHub API")


def create_application(cache: Optional[CacheService] = None) -> FastAPI:
    app = FastAPI(
        title="NewsHub",
        description="News aggregation API: filtered, sorted and personalized article feeds from multiple providers",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    app.state.cache = cache or CacheService(build_cache_store(settings), settings.cache_namespace)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NewsHubError)
    async def newshub_exception_handler(request: Request, exc: NewsHubError):
        status_code = status_code_for(exc)
        log = logger.warning if status_code < 500 else logger.error
        log(
            "Request failed",
            path=request.url.path,
            method=request.method,
            error_code=exc.error_code,
            error=exc.message,
        )
        return JSONResponse(status_code=status_code, content={"success": False, **exc.to_dict()})

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": getattr(request.state, "request_id", None),
            }
        )

    # Health check at root
    from .api.v1.endpoints import health
    app.include_router(health.router, tags=["health"])

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "newshub.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )
