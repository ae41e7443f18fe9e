"""News API request schemas"""

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from ...config import get_settings

DEFAULT_SORT = "-published_at"


class SortField(str, Enum):
    TITLE = "title"
    PUBLISHED_AT = "published_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _as_list(value: Any) -> List[str]:
    """Single strings become one-element lists; comma-free, blank entries dropped"""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class ArticleFilter(BaseModel):
    """Criteria for an article listing. Out-of-range paging values are clamped, not rejected."""
    q: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    authors: List[str] = Field(default_factory=list)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    page: int = 1
    per_page: int = Field(default_factory=lambda: get_settings().default_per_page)
    sort_field: SortField = SortField.PUBLISHED_AT
    sort_direction: SortDirection = SortDirection.DESC

    @field_validator("q", mode="before")
    @classmethod
    def blank_query_is_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None

    @field_validator("categories", "sources", "authors", mode="before")
    @classmethod
    def coerce_label_list(cls, value):
        return _as_list(value)

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, value):
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            return 1

    @field_validator("per_page", mode="before")
    @classmethod
    def clamp_per_page(cls, value):
        settings = get_settings()
        try:
            value = int(value)
        except (TypeError, ValueError):
            return settings.default_per_page
        return min(max(1, value), settings.max_per_page)

    @field_validator("sort_field", mode="before")
    @classmethod
    def fallback_sort_field(cls, value):
        if isinstance(value, SortField):
            return value
        try:
            return SortField(str(value).strip().lower())
        except ValueError:
            return SortField.PUBLISHED_AT

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ArticleFilter":
        """
        Build a filter from request-style parameters.

        Accepts `categories[]` as well as `categories` (same for sources/authors),
        `dateFrom`/`dateTo` as aliases of `date_from`/`date_to`, and a single
        `sort` string where a leading "-" means descending.
        """
        def pick(*names):
            for name in names:
                if name in params and params[name] not in (None, ""):
                    return params[name]
            return None

        sort = pick("sort") or DEFAULT_SORT
        sort = str(sort).strip()
        direction = SortDirection.DESC if sort.startswith("-") else SortDirection.ASC

        data: Dict[str, Any] = {
            "q": pick("q"),
            "categories": pick("categories[]", "categories"),
            "sources": pick("sources[]", "sources"),
            "authors": pick("authors[]", "authors"),
            "date_from": pick("date_from", "dateFrom"),
            "date_to": pick("date_to", "dateTo"),
            "sort_field": sort.lstrip("-+") or SortField.PUBLISHED_AT.value,
            "sort_direction": direction,
        }
        if pick("page") is not None:
            data["page"] = pick("page")
        if pick("per_page") is not None:
            data["per_page"] = pick("per_page")

        return cls(**data)

    def sort_string(self) -> str:
        prefix = "-" if self.sort_direction == SortDirection.DESC else ""
        return f"{prefix}{self.sort_field.value}"

    def cache_params(self) -> Dict[str, Any]:
        """Every field that influences the result, in a JSON-friendly shape"""
        return self.model_dump(mode="json")


class UserPreferencesData(BaseModel):
    """Stored preference set for one user"""
    categories: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    authors: List[str] = Field(default_factory=list)
    language: str = "en"
    theme: str = "light"

    @field_validator("categories", "sources", "authors", mode="before")
    @classmethod
    def coerce_label_list(cls, value):
        return _as_list(value)

    @field_validator("language")
    @classmethod
    def validate_language(cls, value):
        if value not in ("en", "es", "fr", "de"):
            raise ValueError("language must be one of: en, es, fr, de")
        return value

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, value):
        if value not in ("light", "dark"):
            raise ValueError("theme must be one of: light, dark")
        return value

    def has_filters(self) -> bool:
        return bool(self.categories or self.sources or self.authors)
