"""Storage backends for cachepool"""

from cachepool.backends.base import CacheBackend, StoredEntry
from cachepool.backends.factory import get_cache_backend, get_supported_backends
from cachepool.backends.memory import MemoryCacheBackend
from cachepool.backends.redis import RedisCacheBackend

__all__ = [
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "StoredEntry",
    "get_cache_backend",
    "get_supported_backends",
]
