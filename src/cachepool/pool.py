"""Cache pool: creates items on lookup and persists them on save"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from cachepool.backends.base import CacheBackend
from cachepool.backends.factory import get_cache_backend
from cachepool.config import CacheConfig, get_config
from cachepool.exceptions import InvalidArgumentError
from cachepool.expiration import utc_now
from cachepool.item import CacheItem

logger = logging.getLogger(__name__)


class CachePool:
    """Keyed cache pool over a storage backend

    The backend is the single source of truth; items are disconnected
    snapshots that only affect the store through ``save()``.
    """

    def __init__(
        self,
        backend: CacheBackend,
        default_ttl: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize cache pool

        Args:
            backend: Cache backend to use
            default_ttl: TTL in seconds applied when a setter is given no TTL
                (None = never expire)
            clock: Callable returning the current aware datetime (UTC now by default)
        """
        if default_ttl is not None and (
            isinstance(default_ttl, bool) or not isinstance(default_ttl, int)
        ):
            msg = f"default_ttl must be int seconds or None, got {type(default_ttl).__name__}"
            raise InvalidArgumentError(msg)

        self.backend = backend
        self.default_ttl = default_ttl
        self._clock = clock or utc_now

    def now(self) -> datetime:
        """Current time according to the pool clock"""
        return self._clock()

    @staticmethod
    def _check_key(key: Any) -> str:
        if not isinstance(key, str) or not key:
            msg = f"Cache key must be a non-empty string, got {key!r}"
            raise InvalidArgumentError(msg)
        return key

    async def get_item(self, key: str) -> CacheItem:
        """Look up a key and return an item resolved as hit or miss

        Value and deadline come from one backend read, checked against a
        single clock reading taken before the read.

        Raises:
            InvalidArgumentError: If key is not a non-empty string
            BackendUnavailableError: If the backend cannot be reached
        """
        self._check_key(key)
        now = self.now()
        entry = await self.backend.fetch(key, now)
        logger.debug(f"Cache {'hit' if entry is not None else 'miss'} for key {key}")
        return CacheItem(key, self, entry)

    async def has_item(self, key: str) -> bool:
        """Cheap existence check that does not build an item"""
        self._check_key(key)
        return await self.backend.exists(key, self.now())

    async def save(self, item: CacheItem) -> bool:
        """Persist an item's value and expiration

        Replaces any stored entry for the key in one write. A miss with no
        staged value has nothing to persist and is skipped.

        Returns:
            True if the item was written, False if there was nothing to save

        Raises:
            InvalidArgumentError: If item was not created by a CachePool, or its
                value cannot be serialized by the backend
            BackendUnavailableError: If the backend cannot be reached
        """
        if not isinstance(item, CacheItem):
            msg = f"Can only save CacheItem instances, got {type(item).__name__}"
            raise InvalidArgumentError(msg)

        if not item.is_hit() and not item.pending:
            logger.debug(f"Nothing to save for key {item.key}")
            return False

        await self.backend.store(item.key, item.to_entry(), self.now())
        logger.debug(f"Saved cache key {item.key} (expires {item.expiration})")
        return True

    async def delete_item(self, key: str) -> bool:
        """Remove a key from the pool

        Returns:
            True if the key existed
        """
        self._check_key(key)
        return await self.backend.delete(key)

    async def clear(self) -> None:
        """Clear all entries"""
        await self.backend.clear()

    async def close(self) -> None:
        """Close the cache backend"""
        await self.backend.close()

    async def __aenter__(self) -> "CachePool":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_pool(
    config: CacheConfig | None = None,
    clock: Callable[[], datetime] | None = None,
) -> CachePool:
    """Build a pool from cache configuration

    Args:
        config: Cache configuration (global config if None)
        clock: Optional clock override

    Returns:
        Cache pool over the configured backend
    """
    if config is None:
        config = get_config().cache

    if config.backend == "memory":
        backend = get_cache_backend("memory", max_size=config.max_size)
    elif config.backend == "redis":
        backend = get_cache_backend(
            "redis",
            redis_url=config.redis_url,
            db=config.redis_db,
            key_prefix=config.key_prefix,
        )
    else:
        backend = get_cache_backend(config.backend, key_prefix=config.key_prefix)

    logger.info(f"Using {backend.__class__.__name__} (default TTL: {config.default_ttl})")
    return CachePool(backend, default_ttl=config.default_ttl, clock=clock)
