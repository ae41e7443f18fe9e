from newshub.news.schemas.requests import UserPreferencesData
from newshub.services.preferences_service import PreferencesService


def test_defaults_when_nothing_stored(test_db, cache):
    prefs = PreferencesService(test_db, cache).get_user_preferences(42)

    assert prefs.id is None
    assert prefs.categories == []
    assert prefs.language == "en"
    assert prefs.theme == "light"


def test_update_then_read_back(test_db, cache):
    service = PreferencesService(test_db, cache)

    updated = service.update_user_preferences(
        42, UserPreferencesData(categories=["science"], sources=["bbc"], theme="dark")
    )
    stored = service.get_user_preferences(42)

    assert updated.id is not None
    assert updated.user_id == 42
    assert stored.categories == ["science"]
    assert stored.sources == ["bbc"]
    assert stored.authors == []
    assert stored.theme == "dark"


def test_second_update_replaces_the_first(test_db, cache):
    service = PreferencesService(test_db, cache)

    first = service.update_user_preferences(42, UserPreferencesData(categories=["science"]))
    second = service.update_user_preferences(42, UserPreferencesData(authors=["x"]))

    assert first.id == second.id
    assert second.categories == []
    assert second.authors == ["x"]


def test_update_drops_cached_personalized_feeds(test_db, cache, cache_store):
    cache.remember("personalized_feed:abc", lambda: {"articles": []})
    cache.remember("articles:list:abc", lambda: {"articles": []})

    PreferencesService(test_db, cache).update_user_preferences(1, UserPreferencesData(categories=["science"]))

    assert cache_store.get(cache.generate_cache_key("personalized_feed:abc")) is None
    assert cache_store.get(cache.generate_cache_key("articles:list:abc")) is not None
