"""
The Guardian Open Platform adapter
"""

from typing import List, Optional, Dict, Any

from .base import NewsSourceAdapter, ArticleDraft

GENERAL_CATEGORY = "General"


class GuardianAdapter(NewsSourceAdapter):
    """Adapter for the Guardian content search API"""

    key = "guardian"
    name = "The Guardian"
    service_label = "Guardian News"
    api_key_setting = "GUARDIAN_API_KEY"
    external_id_prefix = "guardian"
    endpoint = "/search"

    def build_params(self) -> Dict[str, Any]:
        return {
            "api-key": self.api_key,
            "page-size": self.max_articles,
            "show-fields": "all",
            "order-by": "newest",
        }

    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return (payload.get("response") or {}).get("results") or []

    def map_item(self, item: Dict[str, Any]) -> Optional[ArticleDraft]:
        title = self.clean_text(item.get("webTitle"))
        url = item.get("webUrl") or ""
        if not title or not url:
            return None

        fields = item.get("fields") or {}

        return ArticleDraft(
            external_id=self.generate_external_id(item.get("id") or ""),
            title=title,
            description=self.clean_text(fields.get("trailText")),
            content=self.clean_text(fields.get("bodyText")),
            url=url,
            image_url=fields.get("thumbnail"),
            published_at=self.parse_date(item.get("webPublicationDate")),
            source_name=self.name,
            category_name=item.get("sectionName") or GENERAL_CATEGORY,
            author_name=self.clean_text(fields.get("byline")) or self.name,
        )
