"""In-memory cache backend"""

import asyncio
import copy
import logging
from datetime import datetime

from cachepool.backends.base import CacheBackend, StoredEntry
from cachepool.exceptions import InvalidArgumentError
from cachepool.expiration import is_expired

logger = logging.getLogger(__name__)


class MemoryCacheBackend(CacheBackend):
    """In-memory cache backend using a dictionary

    Good for development and testing, but data is not persistent
    and is not shared between processes. Values are deep-copied on the way
    in and out, so callers never share objects with the store.
    """

    def __init__(self, max_size: int = 1000):
        self._cache: dict[str, StoredEntry] = {}
        self._max_size = max_size
        self._lock = asyncio.Lock()

    async def fetch(self, key: str, now: datetime) -> StoredEntry | None:
        """Fetch an entry from cache"""
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if is_expired(entry.expires_at, now):
                del self._cache[key]
                return None

            return StoredEntry(copy.deepcopy(entry.value), entry.expires_at)

    async def store(self, key: str, entry: StoredEntry, now: datetime) -> None:
        """Store an entry in cache"""
        try:
            value = copy.deepcopy(entry.value)
        except (TypeError, copy.Error) as e:
            msg = f"Cache value cannot be copied into the memory store: {e}"
            raise InvalidArgumentError(msg) from e

        async with self._lock:
            if is_expired(entry.expires_at, now):
                self._cache.pop(key, None)
                return

            # Evict oldest entries if at max size
            if len(self._cache) >= self._max_size and key not in self._cache:
                oldest_key = next(iter(self._cache))
                del self._cache[oldest_key]
                logger.debug(f"Evicted cache key {oldest_key} (max size {self._max_size})")

            self._cache[key] = StoredEntry(value, entry.expires_at)

    async def delete(self, key: str) -> bool:
        """Delete an entry from cache"""
        async with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    async def exists(self, key: str, now: datetime) -> bool:
        """Check if a key exists in cache"""
        async with self._lock:
            entry = self._cache.get(key)
            return entry is not None and not is_expired(entry.expires_at, now)

    async def clear(self) -> None:
        """Clear all cache entries"""
        async with self._lock:
            self._cache.clear()

    async def close(self) -> None:
        """Close the cache backend (no-op for memory cache)"""
        pass

    def size(self) -> int:
        """Get current cache size (for testing/debugging)"""
        return len(self._cache)
