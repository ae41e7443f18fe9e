from datetime import date

import pytest
from pydantic import ValidationError

from newshub.news.schemas.requests import ArticleFilter, SortDirection, SortField, UserPreferencesData


class TestArticleFilterFromParams:
    def test_defaults(self):
        filters = ArticleFilter.from_params({})

        assert filters.page == 1
        assert filters.per_page == 15
        assert filters.sort_field == SortField.PUBLISHED_AT
        assert filters.sort_direction == SortDirection.DESC
        assert filters.categories == []
        assert filters.q is None

    @pytest.mark.parametrize("raw,expected", [("500", 100), (0, 1), (-4, 1), ("abc", 15), (40, 40)])
    def test_per_page_is_clamped(self, raw, expected):
        assert ArticleFilter.from_params({"per_page": raw}).per_page == expected

    @pytest.mark.parametrize("raw,expected", [("0", 1), (-2, 1), ("x", 1), ("3", 3)])
    def test_page_is_at_least_one(self, raw, expected):
        assert ArticleFilter.from_params({"page": raw}).page == expected

    def test_sort_string(self):
        ascending = ArticleFilter.from_params({"sort": "title"})
        descending = ArticleFilter.from_params({"sort": "-created_at"})

        assert (ascending.sort_field, ascending.sort_direction) == (SortField.TITLE, SortDirection.ASC)
        assert (descending.sort_field, descending.sort_direction) == (SortField.CREATED_AT, SortDirection.DESC)
        assert ascending.sort_string() == "title"
        assert descending.sort_string() == "-created_at"

    def test_unknown_sort_field_falls_back_to_published_at(self):
        filters = ArticleFilter.from_params({"sort": "-popularity"})

        assert filters.sort_field == SortField.PUBLISHED_AT
        assert filters.sort_direction == SortDirection.DESC

    def test_label_lists(self):
        filters = ArticleFilter.from_params({
            "categories[]": ["science", " tech ", ""],
            "sources": "bbc",
        })

        assert filters.categories == ["science", "tech"]
        assert filters.sources == ["bbc"]
        assert filters.authors == []

    def test_date_aliases(self):
        filters = ArticleFilter.from_params({"dateFrom": "2024-05-01", "date_to": "2024-05-31"})

        assert filters.date_from == date(2024, 5, 1)
        assert filters.date_to == date(2024, 5, 31)

    def test_invalid_date_is_rejected(self):
        with pytest.raises(ValidationError):
            ArticleFilter.from_params({"date_from": "first of may"})

    def test_blank_query_is_ignored(self):
        assert ArticleFilter.from_params({"q": "   "}).q is None


class TestUserPreferencesData:
    def test_defaults(self):
        data = UserPreferencesData()

        assert data.model_dump() == {
            "categories": [],
            "sources": [],
            "authors": [],
            "language": "en",
            "theme": "light",
        }
        assert not data.has_filters()

    def test_rejects_unknown_language_and_theme(self):
        with pytest.raises(ValidationError):
            UserPreferencesData(language="it")
        with pytest.raises(ValidationError):
            UserPreferencesData(theme="sepia")

    def test_has_filters(self):
        assert UserPreferencesData(authors=["jane-doe"]).has_filters()
