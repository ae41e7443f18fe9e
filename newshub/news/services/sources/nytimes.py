"""
New York Times Article Search adapter
"""

from typing import List, Optional, Dict, Any

from ....utils.string_utils import clean_text as collapse_whitespace
from .base import NewsSourceAdapter, ArticleDraft
from .guardian import GENERAL_CATEGORY

NYTIMES_ASSET_HOST = "https://www.nytimes.com/"


class NYTimesAdapter(NewsSourceAdapter):
    """Adapter for the NYT article search API"""

    key = "nytimes"
    name = "New York Times"
    service_label = "New York Times"
    api_key_setting = "NYTIMES_API_KEY"
    external_id_prefix = "nytimes"
    endpoint = "/articlesearch.json"

    def build_params(self) -> Dict[str, Any]:
        return {
            "api-key": self.api_key,
            "sort": "newest",
            "page": 0,
            "fl": "headline,abstract,lead_paragraph,web_url,multimedia,pub_date,byline,section_name",
        }

    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return (payload.get("response") or {}).get("docs") or []

    def map_item(self, item: Dict[str, Any]) -> Optional[ArticleDraft]:
        title = self.clean_text((item.get("headline") or {}).get("main"))
        url = item.get("web_url") or ""
        if not title or not url:
            return None

        return ArticleDraft(
            external_id=self.generate_external_id(item.get("_id") or ""),
            title=title,
            description=self.clean_text(item.get("abstract")),
            content=self.clean_text(item.get("lead_paragraph")),
            url=url,
            image_url=self._extract_image_url(item.get("multimedia")),
            published_at=self.parse_date(item.get("pub_date")),
            source_name=self.name,
            category_name=item.get("section_name") or GENERAL_CATEGORY,
            author_name=self._extract_author(item.get("byline")),
        )

    def _extract_image_url(self, multimedia) -> Optional[str]:
        # Older payloads use a list of renditions; skip anything else
        if not isinstance(multimedia, list):
            return None

        for media in multimedia:
            if isinstance(media, dict) and media.get("url") and media.get("type") == "image":
                return NYTIMES_ASSET_HOST + media["url"].lstrip("/")
        return None

    def _extract_author(self, byline) -> str:
        if not isinstance(byline, dict):
            return self.name

        if byline.get("original"):
            return self.clean_text(byline["original"]) or self.name

        people = byline.get("person") or []
        if people:
            person = people[0]
            full_name = " ".join(
                (person.get(part) or "") for part in ("firstname", "middlename", "lastname")
            )
            return collapse_whitespace(full_name) or self.name

        return self.name
