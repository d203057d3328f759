"""Tests for expiration resolution"""

from datetime import datetime, timedelta, timezone

import pytest

from cachepool.exceptions import InvalidArgumentError
from cachepool.expiration import (
    Deadline,
    Duration,
    NoTTL,
    Seconds,
    coerce_deadline,
    coerce_duration,
    coerce_ttl,
    is_expired,
    resolve_expiration,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestCoerceTTL:
    """Test mapping raw arguments onto TTL variants"""

    def test_none(self):
        assert coerce_ttl(None) == NoTTL()

    def test_int_seconds(self):
        assert coerce_ttl(60) == Seconds(60)

    def test_timedelta(self):
        assert coerce_ttl(timedelta(minutes=5)) == Duration(timedelta(minutes=5))

    def test_aware_datetime(self):
        deadline = NOW + timedelta(hours=1)
        assert coerce_ttl(deadline) == Deadline(deadline)

    def test_datetime_normalized_to_utc(self):
        tz = timezone(timedelta(hours=9))
        deadline = datetime(2026, 1, 1, 21, 0, tzinfo=tz)
        result = coerce_ttl(deadline)
        assert result.at.tzinfo == timezone.utc
        assert result.at == NOW

    def test_variants_pass_through(self):
        assert coerce_ttl(Seconds(5)) == Seconds(5)
        assert coerce_ttl(NoTTL()) == NoTTL()

    @pytest.mark.parametrize("value", [1.5, "60", True, [60], object()])
    def test_unsupported_types(self, value):
        with pytest.raises(InvalidArgumentError, match="Unsupported TTL type"):
            coerce_ttl(value)

    def test_naive_datetime_rejected(self):
        with pytest.raises(InvalidArgumentError, match="timezone-aware"):
            coerce_ttl(datetime(2026, 1, 1))


class TestCoerceDeadlineAndDuration:
    """Test setter-specific coercion"""

    def test_deadline_none_resets(self):
        assert coerce_deadline(None) == NoTTL()

    def test_deadline_rejects_seconds(self):
        with pytest.raises(InvalidArgumentError):
            coerce_deadline(60)

    def test_duration_accepts_int_and_timedelta(self):
        assert coerce_duration(10) == Seconds(10)
        assert coerce_duration(timedelta(seconds=10)) == Duration(timedelta(seconds=10))
        assert coerce_duration(None) == NoTTL()

    def test_duration_rejects_datetime(self):
        with pytest.raises(InvalidArgumentError):
            coerce_duration(NOW)

    def test_duration_rejects_bool(self):
        with pytest.raises(InvalidArgumentError):
            coerce_duration(False)


class TestResolveExpiration:
    """Test turning TTL variants into deadlines"""

    def test_no_ttl_without_default_never_expires(self):
        assert resolve_expiration(NoTTL(), NOW) is None

    def test_no_ttl_uses_default(self):
        assert resolve_expiration(NoTTL(), NOW, default_ttl=300) == NOW + timedelta(seconds=300)

    def test_seconds(self):
        assert resolve_expiration(Seconds(60), NOW) == NOW + timedelta(seconds=60)

    def test_duration(self):
        delta = timedelta(minutes=2)
        assert resolve_expiration(Duration(delta), NOW) == NOW + delta

    def test_deadline_used_verbatim(self):
        deadline = NOW + timedelta(days=3)
        assert resolve_expiration(Deadline(deadline), NOW, default_ttl=10) == deadline

    def test_explicit_ttl_ignores_default(self):
        assert resolve_expiration(Seconds(5), NOW, default_ttl=3600) == NOW + timedelta(seconds=5)

    def test_zero_and_negative_are_already_expired(self):
        assert is_expired(resolve_expiration(Seconds(0), NOW), NOW)
        assert is_expired(resolve_expiration(Seconds(-10), NOW), NOW)
        assert is_expired(resolve_expiration(Duration(timedelta(seconds=-1)), NOW), NOW)

    def test_overflow_rejected(self):
        with pytest.raises(InvalidArgumentError, match="out of range"):
            resolve_expiration(Seconds(10**12), NOW)


class TestIsExpired:
    """Test deadline checks"""

    def test_never(self):
        assert is_expired(None, NOW) is False

    def test_boundary_is_expired(self):
        assert is_expired(NOW, NOW) is True

    def test_future(self):
        assert is_expired(NOW + timedelta(seconds=1), NOW) is False
