"""
Read-through cache gateway shared by the read paths and invalidated by ingestion.

Keys are logical ("articles:single:42"); the service namespaces them before
they reach the store so prefix invalidation only touches this application.
"""

import hashlib
import json
from typing import Any, Callable, Dict, List, Optional, TypeVar

import structlog

from ..core.cache_store import CacheStore
from ..core.exceptions import CacheDegraded

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Minutes, keyed by the leading segment of the logical key
CACHE_DURATIONS: Dict[str, int] = {
    "categories": 60 * 24,
    "sources": 60 * 24,
    "authors": 60 * 12,
    "filter_options": 60 * 6,
    "articles": 5,
    "personalized_feed": 5,
}
DEFAULT_DURATION_KEY = "articles"
CACHE_TYPES = tuple(CACHE_DURATIONS)


class CacheService:
    def __init__(self, store: CacheStore, namespace: str = "news_aggregator"):
        self.store = store
        self.namespace = namespace

    def remember(self, key: str, compute: Callable[[], T], ttl: Optional[int] = None) -> T:
        """
        Return the cached value for key, computing and storing it on a miss.
        Values must be JSON-serializable; a None result is returned but not stored.

        Args:
            key: Logical cache key
            compute: Zero-argument callable producing the value
            ttl: Override in minutes; defaults to the key's category TTL
        """
        cache_key = self.generate_cache_key(key)

        cached = self.store.get(cache_key)
        if cached is not None:
            logger.debug("cache_hit", key=key)
            return json.loads(cached)

        logger.debug("cache_miss", key=key)
        value = compute()
        if value is None:
            return value

        duration = ttl if ttl is not None else self.get_cache_duration(key)
        self.store.set(cache_key, json.dumps(value, default=str), duration * 60)
        return value

    def forget(self, key: str) -> bool:
        return self.store.delete(self.generate_cache_key(key))

    def forget_by_prefix(self, prefix: str) -> Optional[int]:
        """
        Drop every entry whose logical key starts with prefix.

        On a backend without prefix deletion the whole store is flushed instead;
        returns None in that case since the number of removed entries is unknown.
        """
        full_prefix = self.generate_cache_key(prefix)
        try:
            deleted = self.store.delete_prefix(full_prefix)
            logger.debug("cache_prefix_forgotten", prefix=prefix, deleted=deleted)
            return deleted
        except CacheDegraded as e:
            logger.warning("cache_prefix_unsupported_flushing", prefix=prefix, backend=e.backend)
            self.store.flush()
            return None

    def forget_group(self, group: str) -> None:
        """Forget a base key together with every "group:..." sub-key."""
        self.forget(group)
        self.forget_by_prefix(f"{group}:")

    def clear_type(self, cache_type: str = "all") -> List[str]:
        """
        Administrative clear by cache type; "all" clears every type.
        Returns the types that were cleared.
        """
        if cache_type == "all":
            cleared = []
            for name in CACHE_TYPES:
                cleared.extend(self.clear_type(name))
            return cleared

        if cache_type not in CACHE_TYPES:
            raise ValueError(f"Unknown cache type: {cache_type}")

        if cache_type in ("articles", "personalized_feed"):
            self.forget_by_prefix(f"{cache_type}:")
        else:
            self.forget_group(cache_type)

        logger.info("cache_type_cleared", cache_type=cache_type)
        return [cache_type]

    def generate_cache_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @staticmethod
    def get_cache_duration(key: str) -> int:
        base_key = key.split(":", 1)[0]
        return CACHE_DURATIONS.get(base_key, CACHE_DURATIONS[DEFAULT_DURATION_KEY])


def stable_params_hash(params: Dict[str, Any]) -> str:
    """Deterministic digest of a parameter mapping, ignoring empty values"""
    compact = {k: v for k, v in params.items() if v not in (None, "", [], ())}
    encoded = json.dumps(compact, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()
