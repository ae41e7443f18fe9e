from datetime import datetime

import pytest

from newshub.models.user_preference import UserPreference
from newshub.news.schemas.requests import ArticleFilter, UserPreferencesData
from newshub.news.services.article_persister import ArticlePersister
from newshub.news.services.news_service import NewsService
from newshub.news.services.personalization_service import PersonalizationService
from newshub.repositories.preferences_repository import PreferencesRepository


@pytest.fixture
def seeded(test_db, cache, draft_factory):
    ArticlePersister(test_db, cache).save([
        draft_factory(external_id="s_1", title="Comet seen", category_name="Science",
                      source_name="BBC", published_at=datetime(2024, 5, 1)),
        draft_factory(external_id="b_1", title="Rates hold", category_name="Business",
                      source_name="CNN", published_at=datetime(2024, 5, 2)),
        draft_factory(external_id="s_2", title="Rover lands", category_name="Science",
                      source_name="CNN", published_at=datetime(2024, 5, 3)),
    ])
    return test_db


@pytest.fixture
def personalization(seeded, cache):
    return PersonalizationService(seeded, cache, NewsService(seeded, cache))


def save_preferences(db, user_id, **values):
    PreferencesRepository(db).upsert_for_user(user_id, UserPreferencesData(**values).model_dump())


def titles(page):
    return [article.title for article in page.articles]


class TestPersonalizedFeed:
    def test_user_without_preferences_gets_public_feed(self, personalization, seeded, cache):
        filters = ArticleFilter(categories=["business"])

        personalized = personalization.get_personalized_feed(7, filters)
        public = NewsService(seeded, cache).paginate(filters)

        assert personalized == public
        assert titles(personalized) == ["Rates hold"]

    def test_empty_preference_lists_fall_back(self, personalization, seeded, cache_store):
        save_preferences(seeded, 7, language="de", theme="dark")

        page = personalization.get_personalized_feed(7, ArticleFilter())

        assert len(page.articles) == 3
        assert not any(":personalized_feed:" in key for key in cache_store._entries)

    def test_stored_categories_replace_request_categories(self, personalization, seeded):
        save_preferences(seeded, 7, categories=["science"])

        page = personalization.get_personalized_feed(7, ArticleFilter(categories=["business"]))

        assert titles(page) == ["Rover lands", "Comet seen"]

    def test_stored_lists_combine_across_fields(self, personalization, seeded):
        save_preferences(seeded, 7, categories=["science"], sources=["CNN"])

        page = personalization.get_personalized_feed(7, ArticleFilter())

        assert titles(page) == ["Rover lands"]

    def test_request_paging_and_search_still_apply(self, personalization, seeded):
        save_preferences(seeded, 7, categories=["science"])

        page = personalization.get_personalized_feed(7, ArticleFilter(q="comet"))

        assert titles(page) == ["Comet seen"]

    def test_feeds_are_cached_per_user(self, personalization, seeded, cache_store):
        save_preferences(seeded, 1, categories=["science"])
        save_preferences(seeded, 2, categories=["business"])

        first = personalization.get_personalized_feed(1, ArticleFilter())
        second = personalization.get_personalized_feed(2, ArticleFilter())

        assert titles(first) == ["Rover lands", "Comet seen"]
        assert titles(second) == ["Rates hold"]
        feed_keys = [key for key in cache_store._entries if key.startswith("news_aggregator:personalized_feed:")]
        assert len(feed_keys) == 2

    def test_cache_key_depends_on_user_and_filters(self):
        filters = ArticleFilter(categories=["science"])

        assert PersonalizationService.feed_cache_hash(1, filters) != PersonalizationService.feed_cache_hash(2, filters)
        assert PersonalizationService.feed_cache_hash(1, filters) == PersonalizationService.feed_cache_hash(1, filters)
        assert PersonalizationService.feed_cache_hash(1, filters) != PersonalizationService.feed_cache_hash(
            1, ArticleFilter(categories=["science"], page=2)
        )


def test_preference_row_is_upserted(test_db):
    repository = PreferencesRepository(test_db)

    repository.upsert_for_user(3, {"categories": ["a"]})
    repository.upsert_for_user(3, {"categories": ["b"]})

    rows = test_db.query(UserPreference).filter(UserPreference.user_id == 3).all()
    assert len(rows) == 1
    assert rows[0].preferences == {"categories": ["b"]}
