"""
Response cache for the Rootly client.

A small TTL cache with LRU eviction. List pages and details are cached
briefly so flipping back and forth between pages stays snappy; a manual
refresh clears everything.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Optional, TypeVar

from ..config.constants import CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheStats:
    """Statistics for cache performance monitoring."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    current_size: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate as percentage."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return (self.hits / total) * 100


@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache(Generic[T]):
    """
    Thread-safe TTL cache with LRU eviction.

    Usage:
        cache = TTLCache[PageResult](maxsize=200, ttl=30)
        cache.set("incidents:page=1", result)
        result = cache.get("incidents:page=1")  # None once expired
    """

    def __init__(
        self,
        maxsize: int = CACHE_MAX_ENTRIES,
        ttl: float = CACHE_TTL_SECONDS,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.maxsize = maxsize
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._cache: OrderedDict[Hashable, CacheEntry[T]] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def get(self, key: Hashable) -> Optional[T]:
        """Get a value, or None if missing or expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._stats.misses += 1
                return None

            if self._clock() > entry.expires_at:
                del self._cache[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                self._stats.current_size = len(self._cache)
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            self._stats.hits += 1
            return entry.value

    def set(self, key: Hashable, value: T, ttl: Optional[float] = None) -> None:
        with self._lock:
            actual_ttl = ttl if ttl is not None else self.ttl

            if key in self._cache:
                del self._cache[key]

            # Evict oldest if at capacity
            while len(self._cache) >= self.maxsize:
                self._cache.popitem(last=False)
                self._stats.evictions += 1

            self._cache[key] = CacheEntry(value=value, expires_at=self._clock() + actual_ttl)
            self._stats.current_size = len(self._cache)

    def clear(self) -> int:
        """
        Clear all entries from the cache.

        Returns:
            Number of entries cleared
        """
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._stats.current_size = 0
        logger.debug("Cleared %d entries from %s cache", count, self.name)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def stats(self) -> CacheStats:
        with self._lock:
            self._stats.current_size = len(self._cache)
            return self._stats


class CacheKey:
    """
    Builder for cache keys.

    CacheKey("incidents").with_("page", 2).with_("sort", "-created_at").build()
    gives "incidents:page=2:sort=-created_at". Parameters are sorted so
    insertion order never changes the key.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._params: dict[str, Any] = {}

    def with_(self, name: str, value: Any) -> "CacheKey":
        self._params[name] = value
        return self

    def build(self) -> str:
        parts = [self.prefix]
        for name in sorted(self._params):
            value = self._params[name]
            parts.append(f"{name}={'' if value is None else value}")
        return ":".join(parts)
