import pytest
import httpx
from datetime import datetime

from newshub.core.exceptions import ConfigurationError, ProviderError
from newshub.news.services.sources.guardian import GuardianAdapter
from newshub.news.services.sources.nytimes import NYTimesAdapter
from newshub.news.services.sources.newsorg import NewsOrgAdapter
from newshub.news.services.sources.manager import NewsSourceManager
from newshub.utils.string_utils import md5_hex, slugify


def client_returning(payload=None, status_code=200, captured=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return httpx.Response(status_code, json=payload if payload is not None else {})

    return httpx.Client(transport=httpx.MockTransport(handler))


GUARDIAN_PAYLOAD = {
    "response": {
        "results": [
            {
                "id": "world/2024/may/01/election",
                "webTitle": "<b>Election night</b>",
                "webUrl": "https://www.theguardian.com/world/2024/may/01/election",
                "sectionName": "World news",
                "webPublicationDate": "2024-05-01T10:00:00Z",
                "fields": {
                    "trailText": "<p>Polls <em>close</em></p>",
                    "bodyText": "Full body",
                    "thumbnail": "https://media.guim.co.uk/thumb.jpg",
                    "byline": "Jane Doe",
                },
            },
            {"id": "no-url", "webTitle": "Missing url"},
            {
                "id": "sport/2024/may/02/final",
                "webTitle": "Cup final",
                "webUrl": "https://www.theguardian.com/sport/2024/may/02/final",
                "webPublicationDate": "yesterday-ish",
            },
        ]
    }
}


class TestGuardianAdapter:
    def test_missing_key_fails_at_construction(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GuardianAdapter(api_key=None, base_url="https://content.guardianapis.com")

        assert str(exc_info.value) == (
            "API configuration missing for Guardian News. "
            "Please set GUARDIAN_API_KEY in your environment file."
        )
        assert exc_info.value.missing_key == "GUARDIAN_API_KEY"

    def test_fetch_normalizes_results(self):
        captured = []
        adapter = GuardianAdapter(
            api_key="key",
            base_url="https://content.guardianapis.com/",
            max_articles=10,
            client=client_returning(GUARDIAN_PAYLOAD, captured=captured),
        )

        drafts = adapter.fetch_news()

        assert len(drafts) == 2
        first = drafts[0]
        assert first.external_id == "guardian_" + md5_hex("world/2024/may/01/election")
        assert first.title == "Election night"
        assert first.description == "Polls close"
        assert first.content == "Full body"
        assert first.image_url == "https://media.guim.co.uk/thumb.jpg"
        assert first.published_at == datetime(2024, 5, 1, 10, 0, 0)
        assert first.source_name == "The Guardian"
        assert first.category_name == "World news"
        assert first.author_name == "Jane Doe"

        request = captured[0]
        assert request.url.path == "/search"
        assert request.url.params["api-key"] == "key"
        assert request.url.params["page-size"] == "10"
        assert request.url.params["order-by"] == "newest"
        assert request.url.params["show-fields"] == "all"

    def test_defaults_for_missing_fields(self):
        adapter = GuardianAdapter(api_key="key", base_url="https://x", client=client_returning(GUARDIAN_PAYLOAD))

        second = adapter.fetch_news()[1]

        assert second.category_name == "General"
        assert second.author_name == "The Guardian"
        assert second.description == ""
        assert second.published_at is None

    def test_non_success_status_raises_provider_error(self):
        adapter = GuardianAdapter(api_key="key", base_url="https://x", client=client_returning({}, status_code=500))

        with pytest.raises(ProviderError) as exc_info:
            adapter.fetch_news()

        assert str(exc_info.value) == "News Provider [Guardian News]: API request failed with status 500"
        assert exc_info.value.status_code == 500

    def test_transport_failure_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        adapter = GuardianAdapter(
            api_key="key",
            base_url="https://x",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(ProviderError) as exc_info:
            adapter.fetch_news()

        assert exc_info.value.status_code == 0
        assert "connection refused" in str(exc_info.value)


class TestNYTimesAdapter:
    PAYLOAD = {
        "response": {
            "docs": [
                {
                    "_id": "nyt://article/1",
                    "headline": {"main": "Markets rally"},
                    "abstract": "Stocks rose.",
                    "lead_paragraph": "<p>Stocks rose sharply.</p>",
                    "web_url": "https://www.nytimes.com/2024/05/01/business/markets.html",
                    "multimedia": [
                        {"type": "video", "url": "video/clip.mp4"},
                        {"type": "image", "url": "images/2024/05/01/markets.jpg"},
                    ],
                    "pub_date": "2024-05-01T08:30:00+0200",
                    "byline": {"original": "By Ann Lee"},
                    "section_name": "Business",
                },
                {
                    "_id": "nyt://article/2",
                    "headline": {"main": "Quiet day"},
                    "web_url": "https://www.nytimes.com/2024/05/01/quiet.html",
                    "byline": {"person": [{"firstname": "John", "middlename": None, "lastname": "Public"}]},
                },
                {"_id": "nyt://article/3", "headline": {"main": ""}, "web_url": "https://x"},
            ]
        }
    }

    def test_fetch_normalizes_docs(self):
        captured = []
        adapter = NYTimesAdapter(
            api_key="key",
            base_url="https://api.nytimes.com/svc/search/v2",
            client=client_returning(self.PAYLOAD, captured=captured),
        )

        drafts = adapter.fetch_news()

        assert len(drafts) == 2
        first, second = drafts
        assert first.external_id == "nytimes_" + md5_hex("nyt://article/1")
        assert first.content == "Stocks rose sharply."
        assert first.image_url == "https://www.nytimes.com/images/2024/05/01/markets.jpg"
        assert first.published_at == datetime(2024, 5, 1, 6, 30, 0)
        assert first.author_name == "By Ann Lee"
        assert first.category_name == "Business"
        assert first.source_name == "New York Times"

        assert second.author_name == "John Public"
        assert second.category_name == "General"
        assert second.image_url is None

        assert captured[0].url.path.endswith("/articlesearch.json")
        assert captured[0].url.params["sort"] == "newest"

    def test_missing_key_names_the_setting(self):
        with pytest.raises(ConfigurationError) as exc_info:
            NYTimesAdapter(api_key="", base_url="https://x")

        assert exc_info.value.missing_key == "NYTIMES_API_KEY"


class TestNewsOrgAdapter:
    PAYLOAD = {
        "articles": [
            {
                "source": {"name": "BBC News"},
                "author": None,
                "title": "Headline one",
                "description": "Desc",
                "url": "https://bbc.co.uk/1",
                "urlToImage": "https://bbc.co.uk/1.jpg",
                "publishedAt": "2024-05-01T10:00:00Z",
                "content": "Body",
            },
            {"source": {}, "author": "Reporter", "title": "Headline two", "url": "https://x.com/2"},
            {"title": "No url"},
            {"source": {"name": "CNN"}, "title": "Headline three", "url": "https://cnn.com/3"},
        ]
    }

    def test_fetch_caps_and_normalizes(self):
        adapter = NewsOrgAdapter(
            api_key="key",
            base_url="https://newsapi.org/v2",
            max_articles=2,
            client=client_returning(self.PAYLOAD),
        )

        drafts = adapter.fetch_news()

        assert len(drafts) == 2
        first, second = drafts
        assert first.external_id == "newsorg_" + md5_hex("https://bbc.co.uk/1")
        assert first.source_name == "BBC News"
        assert first.author_name == "NewsOrg"
        assert first.category_name == "General"
        assert first.image_url == "https://bbc.co.uk/1.jpg"
        assert second.source_name == "NewsOrg"
        assert second.author_name == "Reporter"

    def test_invalid_json_body_becomes_provider_error(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>not json</html>")

        adapter = NewsOrgAdapter(
            api_key="key",
            base_url="https://newsapi.org/v2",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(ProviderError) as exc_info:
            adapter.fetch_news()

        assert str(exc_info.value).startswith("News Provider [NewsOrg]: ")


class TestNewsSourceManager:
    def test_all_configured_sources_in_fixed_order(self, mock_settings):
        manager = NewsSourceManager(mock_settings)

        assert manager.get_available_sources() == ["guardian", "nytimes", "newsorg"]
        assert [source.name for source in manager.get_sources()] == ["The Guardian", "New York Times", "NewsOrg"]

    def test_unconfigured_source_is_left_out(self, mock_settings):
        mock_settings.nytimes_api_key = None

        manager = NewsSourceManager(mock_settings)

        assert manager.get_available_sources() == ["guardian", "newsorg"]

    def test_get_sources_matches_key_or_display_name(self, mock_settings):
        manager = NewsSourceManager(mock_settings)

        assert [s.key for s in manager.get_sources(["The Guardian"])] == ["guardian"]
        assert [s.key for s in manager.get_sources(["NEWSORG"])] == ["newsorg"]
        assert manager.get_sources(["bbc"]) == []


def test_slug_is_deterministic_and_lossy():
    assert slugify("Tech Crunch") == "tech-crunch"
    assert slugify("Tech Crunch") == slugify("Tech Crunch")
    assert slugify("  World / News!! ") == "world-news"
    assert slugify("BBC") == "bbc"
