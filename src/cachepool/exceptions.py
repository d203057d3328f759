"""Exceptions raised by cachepool"""


class CacheError(Exception):
    """Base exception for cache operations"""

    pass


class InvalidArgumentError(CacheError, ValueError):
    """Unsupported or malformed argument (TTL, expiration, key or item)"""

    pass


class BackendUnavailableError(CacheError):
    """The backing store could not be reached"""

    def __init__(self, operation: str, key: str | None = None, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        target = f" for key '{key}'" if key is not None else ""
        msg = f"Cache backend unavailable during {operation}{target}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
