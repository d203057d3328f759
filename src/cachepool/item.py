"""Cache item: a transient handle for one key in a pool"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from cachepool.backends.base import StoredEntry
from cachepool.expiration import (
    TTL,
    coerce_deadline,
    coerce_duration,
    coerce_ttl,
    resolve_expiration,
)

if TYPE_CHECKING:
    from cachepool.pool import CachePool

_UNSET: Any = object()


class CacheItem:
    """A snapshot of one key's value and expiration

    Items are created by ``CachePool.get_item`` with their hit/miss state
    already resolved. ``get()`` and ``is_hit()`` only ever reflect that
    snapshot: values staged with ``set()`` are invisible until the item is
    saved and fetched again. Setters mutate in place and return the item so
    calls can be chained::

        item = await pool.get_item("foo")
        if not item.is_hit():
            await pool.save(item.set(compute(), ttl=60))
    """

    def __init__(self, key: str, pool: "CachePool", entry: StoredEntry | None = None):
        self._key = key
        self._pool = pool
        self._hit = entry is not None
        self._value = entry.value if entry is not None else None
        self._expiration = entry.expires_at if entry is not None else None
        self._pending = _UNSET

    @property
    def key(self) -> str:
        """The key for this item (never changes)"""
        return self._key

    def get_key(self) -> str:
        """Return the key for this item"""
        return self._key

    def get(self) -> Any:
        """Return the fetched value, or None on a miss

        None is also a legitimate cached value; use ``is_hit()`` to tell the
        two apart.
        """
        if not self._hit:
            return None
        return self._value

    def is_hit(self) -> bool:
        """Whether the lookup that created this item was a cache hit"""
        return self._hit

    async def exists(self) -> bool:
        """Check whether the key exists in the pool

        Hit items answer from their snapshot. Misses ask the backend, which
        may report an entry that a fresh ``get_item`` then sees as expired.
        Use ``is_hit()`` for a race-free answer.
        """
        if self._hit:
            return True
        return await self._pool.has_item(self._key)

    @property
    def expiration(self) -> datetime | None:
        """Current deadline, or None if the item never expires"""
        return self._expiration

    @property
    def pending(self) -> bool:
        """Whether a value has been staged with ``set()`` but not yet saved"""
        return self._pending is not _UNSET

    def pending_value(self) -> Any:
        """The value ``save()`` will persist: the staged value, else the snapshot"""
        if self._pending is not _UNSET:
            return self._pending
        return self._value

    def _resolve(self, ttl: TTL) -> datetime | None:
        return resolve_expiration(ttl, self._pool.now(), self._pool.default_ttl)

    def set(self, value: Any, ttl: Any = None) -> "CacheItem":
        """Stage a value and (re)compute the expiration

        Args:
            value: Value to store on the next save
            ttl: None (pool default or never), int seconds, aware datetime
                deadline or timedelta

        Returns:
            This item

        Raises:
            InvalidArgumentError: If ttl is not a supported type
        """
        expiration = self._resolve(coerce_ttl(ttl))
        self._pending = value
        self._expiration = expiration
        return self

    def expires_at(self, expiration: datetime | None) -> "CacheItem":
        """Set an absolute deadline; None resets to the pool default or never"""
        self._expiration = self._resolve(coerce_deadline(expiration))
        return self

    def expires_after(self, time: Any) -> "CacheItem":
        """Set the deadline to now plus int seconds or a timedelta

        None resets to the pool default or never.
        """
        self._expiration = self._resolve(coerce_duration(time))
        return self

    def to_entry(self) -> StoredEntry:
        """Snapshot of what a save would persist"""
        return StoredEntry(value=self.pending_value(), expires_at=self._expiration)

    def __repr__(self) -> str:
        state = "hit" if self._hit else "miss"
        return f"CacheItem(key={self._key!r}, {state}, expiration={self._expiration!r})"
