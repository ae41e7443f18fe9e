"""
News Module
===========

Article ingestion and read paths:
- Provider adapters (The Guardian, New York Times, NewsAPI.org)
- Ingestion orchestration and idempotent persistence
- Filtered listings, article detail and personalized feeds
- Category, source and author listings for filter menus
"""
