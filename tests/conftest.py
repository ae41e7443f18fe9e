import pytest
from datetime import datetime
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from newshub.core.cache_store import MemoryCacheStore
from newshub.core.database import Base, enable_sqlite_savepoints
from newshub.core.exceptions import ProviderError
from newshub.news.models import article, taxonomy  # noqa: F401
from newshub.models import user_preference  # noqa: F401
from newshub.news.services.sources.base import ArticleDraft
from newshub.services.cache_service import CacheService


class FakeSource:
    """Stands in for a provider adapter; returns canned drafts or raises"""

    def __init__(self, key, name, drafts=None, error=None):
        self.key = key
        self.name = name
        self.service_label = name
        self.drafts = drafts or []
        self.error = error
        self.calls = 0
        self.closed = False

    def fetch_news(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.drafts)

    def close(self):
        self.closed = True


def build_draft(**overrides) -> ArticleDraft:
    data = {
        "external_id": "g_1",
        "title": "A",
        "description": "",
        "content": "",
        "url": "https://example.com/a",
        "source_name": "BBC",
        "category_name": "Tech",
        "author_name": "X",
        "image_url": None,
        "published_at": datetime(2024, 5, 1, 12, 0, 0),
    }
    data.update(overrides)
    return ArticleDraft(**data)


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.guardian_api_key = "test-guardian-key"
    settings.guardian_base_url = "https://content.guardianapis.com"
    settings.nytimes_api_key = "test-nytimes-key"
    settings.nytimes_base_url = "https://api.nytimes.com/svc/search/v2"
    settings.newsorg_api_key = "test-newsorg-key"
    settings.newsorg_base_url = "https://newsapi.org/v2"
    settings.news_request_timeout = 5
    settings.news_max_articles_per_source = 50
    settings.ingestion_fetch_workers = 1
    return settings


@pytest.fixture
def engine():
    # One shared in-memory connection; savepoints need the pysqlite recipe
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def test_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def cache_store():
    return MemoryCacheStore()


@pytest.fixture
def cache(cache_store):
    return CacheService(cache_store, namespace="news_aggregator")


@pytest.fixture
def draft_factory():
    return build_draft


@pytest.fixture
def fake_source_factory():
    return FakeSource


@pytest.fixture
def failing_source():
    return FakeSource(
        "nytimes",
        "New York Times",
        error=ProviderError("New York Times", "API request failed with status 500", 500),
    )


@pytest.fixture
async def async_client(test_db, cache):
    from httpx import AsyncClient, ASGITransport
    from newshub.main import app
    from newshub.core.database import get_db

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    original_cache = app.state.cache
    app.state.cache = cache

    # ASGITransport skips the lifespan, so no tables are created on the real database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.state.cache = original_cache
    app.dependency_overrides.clear()
