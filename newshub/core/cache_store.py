"""
Key-value cache backends used behind CacheService.

Every backend stores raw strings with a TTL in seconds. Prefix deletion is
optional: a backend that cannot do it raises CacheDegraded and the caller
falls back to flush().
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import redis
import structlog

from .exceptions import CacheDegraded

logger = structlog.get_logger(__name__)


class CacheStore(ABC):
    backend_name: str = "abstract"

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass

    def delete_prefix(self, prefix: str) -> int:
        raise CacheDegraded(self.backend_name)

    @abstractmethod
    def flush(self) -> None:
        pass


class MemoryCacheStore(CacheStore):
    """In-process store for development and tests. Thread-safe, TTL-aware."""

    backend_name = "memory"

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisCacheStore(CacheStore):
    """Shared store backed by Redis; prefix deletion walks keys with SCAN."""

    backend_name = "redis"

    def __init__(self, client: redis.Redis, scan_batch_size: int = 500):
        self.client = client
        self.scan_batch_size = scan_batch_size

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.client.set(key, value, ex=ttl_seconds)

    def delete(self, key: str) -> bool:
        return bool(self.client.delete(key))

    def delete_prefix(self, prefix: str) -> int:
        deleted = 0
        batch = []
        for key in self.client.scan_iter(match=f"{prefix}*", count=self.scan_batch_size):
            batch.append(key)
            if len(batch) >= self.scan_batch_size:
                deleted += self.client.delete(*batch)
                batch = []
        if batch:
            deleted += self.client.delete(*batch)
        return deleted

    def flush(self) -> None:
        self.client.flushdb()


def build_cache_store(settings) -> CacheStore:
    if settings.cache_store == "redis":
        logger.info("cache_store_selected", backend="redis", url=settings.redis_url)
        return RedisCacheStore.from_url(settings.redis_url)

    logger.info("cache_store_selected", backend="memory")
    return MemoryCacheStore()
