"""Redis cache backend"""

import json
import logging
import math
from datetime import datetime
from typing import Any

import redis.asyncio as redis

from cachepool.backends.base import CacheBackend, StoredEntry
from cachepool.exceptions import BackendUnavailableError, InvalidArgumentError
from cachepool.expiration import is_expired

logger = logging.getLogger(__name__)


def encode_entry(entry: StoredEntry) -> str:
    """Serialize an entry into a single JSON envelope

    Only values that decode back equal to themselves are accepted: tuples,
    non-string dict keys and NaN/infinity would come back changed.

    Raises:
        InvalidArgumentError: If the value does not survive a JSON round trip
    """
    envelope = {
        "value": entry.value,
        "expires_at": entry.expires_at.isoformat() if entry.expires_at else None,
    }
    try:
        payload = json.dumps(envelope, allow_nan=False)
    except (TypeError, ValueError) as e:
        msg = f"Cache value is not JSON serializable: {e}"
        raise InvalidArgumentError(msg) from e

    decoded = json.loads(payload)["value"]
    if not _same_json(decoded, entry.value):
        msg = f"Cache value does not survive a JSON round trip: {type(entry.value).__name__}"
        raise InvalidArgumentError(msg)
    return payload


def _same_json(decoded: Any, original: Any) -> bool:
    """Compare a decoded value with the original, types included"""
    if type(decoded) is not type(original):
        return False
    if isinstance(original, dict):
        return list(decoded) == list(original) and all(
            _same_json(decoded[k], original[k]) for k in original
        )
    if isinstance(original, list):
        return len(decoded) == len(original) and all(
            _same_json(d, o) for d, o in zip(decoded, original)
        )
    return decoded == original


def decode_entry(payload: str) -> StoredEntry:
    """Deserialize a JSON envelope written by ``encode_entry``

    Raises:
        ValueError: If the payload is not a valid envelope
    """
    envelope = json.loads(payload)
    if not isinstance(envelope, dict) or "value" not in envelope:
        msg = "Cache payload is not an entry envelope"
        raise ValueError(msg)

    expires_at = envelope.get("expires_at")
    if expires_at is None:
        return StoredEntry(value=envelope["value"])
    if not isinstance(expires_at, str):
        msg = f"Cache payload deadline is not a string: {expires_at!r}"
        raise ValueError(msg)

    deadline = datetime.fromisoformat(expires_at)
    if deadline.tzinfo is None:
        msg = f"Cache payload deadline is not timezone-aware: {expires_at}"
        raise ValueError(msg)
    return StoredEntry(value=envelope["value"], expires_at=deadline)


class RedisCacheBackend(CacheBackend):
    """Redis cache backend for persistent, distributed caching

    Value and deadline share one JSON envelope written with a single SET, so
    readers never see one without the other.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379",
        db: int = 0,
        key_prefix: str = "cachepool:",
        encoding: str = "utf-8",
    ):
        self.url = url
        self.db = db
        self.key_prefix = key_prefix
        self.encoding = encoding
        self._client: Any = None

    async def _get_client(self) -> Any:
        """Get or create Redis client"""
        if self._client is None:
            self._client = redis.from_url(
                self.url,
                db=self.db,
                encoding=self.encoding,
                decode_responses=True,
            )
        return self._client

    def _make_key(self, key: str) -> str:
        """Add prefix to cache key"""
        return f"{self.key_prefix}{key}"

    def _unavailable(
        self, operation: str, key: str | None, error: Exception
    ) -> BackendUnavailableError:
        logger.error(f"Redis {operation} failed for key {key}: {error}")
        return BackendUnavailableError(operation, key, str(error))

    async def fetch(self, key: str, now: datetime) -> StoredEntry | None:
        """Fetch an entry from cache"""
        client = await self._get_client()

        try:
            payload = await client.get(self._make_key(key))
        except (redis.RedisError, OSError) as e:
            raise self._unavailable("fetch", key, e) from e

        if payload is None:
            return None

        try:
            entry = decode_entry(payload)
        except ValueError as e:
            # Corrupt payloads read as a miss
            logger.warning(f"Discarding undecodable cache payload for key {key}: {e}")
            return None

        if is_expired(entry.expires_at, now):
            return None
        return entry

    async def store(self, key: str, entry: StoredEntry, now: datetime) -> None:
        """Store an entry in cache"""
        client = await self._get_client()
        prefixed_key = self._make_key(key)
        payload = encode_entry(entry)

        try:
            if entry.expires_at is None:
                await client.set(prefixed_key, payload)
                return

            # Remaining lifetime is measured against the pool clock
            remaining_ms = math.ceil((entry.expires_at - now).total_seconds() * 1000)
            if remaining_ms <= 0:
                await client.delete(prefixed_key)
            else:
                await client.set(prefixed_key, payload, px=remaining_ms)
        except (redis.RedisError, OSError) as e:
            raise self._unavailable("store", key, e) from e

    async def delete(self, key: str) -> bool:
        """Delete an entry from cache"""
        client = await self._get_client()

        try:
            result = await client.delete(self._make_key(key))
        except (redis.RedisError, OSError) as e:
            raise self._unavailable("delete", key, e) from e
        return result > 0

    async def exists(self, key: str, now: datetime) -> bool:
        """Check if a key exists in cache (without loading its value)"""
        client = await self._get_client()

        try:
            result = await client.exists(self._make_key(key))
        except (redis.RedisError, OSError) as e:
            raise self._unavailable("exists", key, e) from e
        return result > 0

    async def clear(self) -> None:
        """Clear all cache entries with our prefix"""
        client = await self._get_client()

        try:
            pattern = f"{self.key_prefix}*"
            keys = []
            async for key in client.scan_iter(match=pattern):
                keys.append(key)

            if keys:
                await client.delete(*keys)
        except (redis.RedisError, OSError) as e:
            raise self._unavailable("clear", None, e) from e

    async def close(self) -> None:
        """Close the Redis connection"""
        if self._client:
            try:
                await self._client.aclose()
            except (redis.RedisError, OSError) as e:
                logger.warning(f"Error closing Redis connection: {e}")
            self._client = None
