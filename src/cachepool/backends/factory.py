"""Cache backend factory"""

from cachepool.backends.base import CacheBackend
from cachepool.backends.memory import MemoryCacheBackend
from cachepool.backends.redis import RedisCacheBackend

SUPPORTED_BACKENDS = ["memory", "redis", "test_redis"]


def get_cache_backend(
    backend_type: str = "memory",
    redis_url: str | None = None,
    **kwargs,
) -> CacheBackend:
    """Get a cache backend instance

    Args:
        backend_type: Type of cache backend ("memory", "redis", or "test_redis")
        redis_url: Redis connection URL (for redis backend)
        **kwargs: Additional backend-specific arguments

    Returns:
        Cache backend instance

    Raises:
        ValueError: If backend type is not supported
        ImportError: If the fakeredis backend is requested but not installed
    """
    if backend_type == "memory":
        return MemoryCacheBackend(**kwargs)

    elif backend_type == "redis":
        redis_kwargs = kwargs.copy()
        if redis_url:
            redis_kwargs["url"] = redis_url

        return RedisCacheBackend(**redis_kwargs)

    elif backend_type == "test_redis":
        # Import here to avoid dependency issues
        from cachepool.backends.test_redis import FakeRedisCacheBackend

        return FakeRedisCacheBackend(**kwargs)

    else:
        msg = f"Unsupported cache backend: {backend_type}. Supported: {', '.join(SUPPORTED_BACKENDS)}"
        raise ValueError(msg)


def get_supported_backends() -> list[str]:
    """Get list of supported cache backend types"""
    from cachepool.backends.test_redis import FAKEREDIS_AVAILABLE

    backends = ["memory", "redis"]
    if FAKEREDIS_AVAILABLE:
        backends.append("test_redis")
    return backends
