"""cachepool: keyed cache items with expiration over pluggable backends"""

from cachepool.backends import (
    CacheBackend,
    MemoryCacheBackend,
    RedisCacheBackend,
    StoredEntry,
    get_cache_backend,
)
from cachepool.exceptions import (
    BackendUnavailableError,
    CacheError,
    InvalidArgumentError,
)
from cachepool.item import CacheItem
from cachepool.pool import CachePool, create_pool

__version__ = "0.1.0"

__all__ = [
    "BackendUnavailableError",
    "CacheBackend",
    "CacheError",
    "CacheItem",
    "CachePool",
    "InvalidArgumentError",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "StoredEntry",
    "create_pool",
    "get_cache_backend",
]
