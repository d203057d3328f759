"""Expiration resolution

Normalizes the different ways of expressing a time-to-live into a single
absolute deadline (or ``None`` for "never expires").
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Union

from cachepool.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class NoTTL:
    """No TTL given: fall back to the pool default, or never expire"""


@dataclass(frozen=True)
class Seconds:
    """TTL in whole seconds from the moment of the call"""

    seconds: int


@dataclass(frozen=True)
class Deadline:
    """Absolute point in time after which the item is expired"""

    at: datetime


@dataclass(frozen=True)
class Duration:
    """TTL as a relative duration from the moment of the call"""

    delta: timedelta


TTL = Union[NoTTL, Seconds, Deadline, Duration]

_TTL_TYPES = (NoTTL, Seconds, Deadline, Duration)


def utc_now() -> datetime:
    """Default clock: the current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def _check_aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        msg = f"Expiration datetime must be timezone-aware, got naive {value!r}"
        raise InvalidArgumentError(msg)
    return value.astimezone(timezone.utc)


def coerce_deadline(value: Any) -> TTL:
    """Coerce an ``expires_at`` argument

    Args:
        value: Aware datetime, or None to reset to the default

    Returns:
        Deadline or NoTTL

    Raises:
        InvalidArgumentError: If value is not an aware datetime or None
    """
    if value is None:
        return NoTTL()
    if isinstance(value, datetime):
        return Deadline(_check_aware(value))
    msg = f"Expiration must be a datetime or None, got {type(value).__name__}"
    raise InvalidArgumentError(msg)


def coerce_duration(value: Any) -> TTL:
    """Coerce an ``expires_after`` argument

    Args:
        value: Seconds (int), timedelta, or None to reset to the default

    Returns:
        Seconds, Duration or NoTTL

    Raises:
        InvalidArgumentError: If value is not an int, timedelta or None
    """
    if value is None:
        return NoTTL()
    # bool is an int subclass but never a meaningful TTL
    if isinstance(value, int) and not isinstance(value, bool):
        return Seconds(value)
    if isinstance(value, timedelta):
        return Duration(value)
    msg = f"Expiration interval must be int seconds, timedelta or None, got {type(value).__name__}"
    raise InvalidArgumentError(msg)


def coerce_ttl(value: Any) -> TTL:
    """Coerce any TTL argument accepted by ``CacheItem.set``

    Accepts None, int seconds, an aware datetime, a timedelta, or an
    already-built TTL variant.
    """
    if isinstance(value, _TTL_TYPES):
        if isinstance(value, Deadline):
            return Deadline(_check_aware(value.at))
        return value
    if isinstance(value, datetime):
        return coerce_deadline(value)
    # bool is an int subclass but never a meaningful TTL
    if value is None or (
        isinstance(value, (int, timedelta)) and not isinstance(value, bool)
    ):
        return coerce_duration(value)
    msg = f"Unsupported TTL type: {type(value).__name__}"
    raise InvalidArgumentError(msg)


def resolve_expiration(
    ttl: TTL, now: datetime, default_ttl: int | None = None
) -> datetime | None:
    """Resolve a TTL into an absolute deadline

    Zero or negative durations are not rejected: they resolve to a deadline
    at or before ``now`` so the item reads as expired on the next lookup.

    Args:
        ttl: TTL variant
        now: Reference time for relative TTLs
        default_ttl: Pool default TTL in seconds (None = never expire)

    Returns:
        Aware UTC datetime, or None if the item never expires
    """
    try:
        if isinstance(ttl, NoTTL):
            if default_ttl is None:
                return None
            return now + timedelta(seconds=default_ttl)
        if isinstance(ttl, Seconds):
            return now + timedelta(seconds=ttl.seconds)
        if isinstance(ttl, Duration):
            return now + ttl.delta
    except OverflowError as e:
        msg = f"TTL out of range: {ttl!r}"
        raise InvalidArgumentError(msg) from e
    if isinstance(ttl, Deadline):
        return ttl.at
    msg = f"Unsupported TTL type: {type(ttl).__name__}"
    raise InvalidArgumentError(msg)


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """Check whether a deadline has passed at ``now``"""
    return expires_at is not None and expires_at <= now
