"""Base cache backend interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class StoredEntry:
    """A value and its deadline, always read and written together"""

    value: Any
    expires_at: datetime | None = None


class CacheBackend(ABC):
    """Abstract base class for cache backends

    Backends own the durable mapping key -> StoredEntry. Each method must
    treat a single key atomically: an entry's value and deadline are never
    observed or written separately.
    """

    @abstractmethod
    async def fetch(self, key: str, now: datetime) -> StoredEntry | None:
        """Fetch an entry from cache

        Args:
            key: Cache key
            now: Reference time for the expiration check

        Returns:
            Stored entry, or None if not found/expired at ``now``

        Raises:
            BackendUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def store(self, key: str, entry: StoredEntry, now: datetime) -> None:
        """Store an entry, replacing any prior entry for the key

        An entry whose deadline is at or before ``now`` removes the key.

        Args:
            key: Cache key
            entry: Value and deadline to store
            now: Reference time for the expiration check

        Raises:
            BackendUnavailableError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete an entry from cache

        Args:
            key: Cache key

        Returns:
            True if key existed and was deleted, False otherwise
        """
        pass

    @abstractmethod
    async def exists(self, key: str, now: datetime) -> bool:
        """Check if a key exists in cache

        May answer without loading the value, so it can report True for an
        entry that a following fetch reports as missing.

        Args:
            key: Cache key
            now: Reference time for the expiration check

        Returns:
            True if key exists
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Clear all cache entries"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the cache backend and cleanup resources"""
        pass
