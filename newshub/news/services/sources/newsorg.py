"""
NewsAPI.org top-headlines adapter
"""

from typing import List, Optional, Dict, Any

from .base import NewsSourceAdapter, ArticleDraft
from .guardian import GENERAL_CATEGORY


class NewsOrgAdapter(NewsSourceAdapter):
    """Adapter for NewsAPI.org; one request aggregates many publishers"""

    key = "newsorg"
    name = "NewsOrg"
    service_label = "NewsOrg"
    api_key_setting = "NEWSORG_API_KEY"
    external_id_prefix = "newsorg"
    endpoint = "/top-headlines"

    def build_params(self) -> Dict[str, Any]:
        return {
            "apiKey": self.api_key,
            "language": "en",
            "sortBy": "publishedAt",
            "pageSize": self.max_articles,
        }

    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return payload.get("articles") or []

    def map_item(self, item: Dict[str, Any]) -> Optional[ArticleDraft]:
        if not item.get("title") or not item.get("url"):
            return None

        url = item["url"]
        source = item.get("source") or {}

        return ArticleDraft(
            external_id=self.generate_external_id(url),
            title=self.clean_text(item["title"]),
            description=self.clean_text(item.get("description")),
            content=self.clean_text(item.get("content")),
            url=url,
            image_url=item.get("urlToImage"),
            published_at=self.parse_date(item.get("publishedAt")),
            source_name=source.get("name") or self.name,
            category_name=GENERAL_CATEGORY,
            author_name=self.clean_text(item.get("author")) or self.name,
        )
