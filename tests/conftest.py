from datetime import datetime, timedelta, timezone

import fakeredis
import pytest
from hypothesis import Verbosity, settings

from cachepool.backends.memory import MemoryCacheBackend
from cachepool.backends.test_redis import FakeRedisCacheBackend
from cachepool.config import clear_config
from cachepool.pool import CachePool

# Register test profiles
settings.register_profile("dev", max_examples=10)
settings.register_profile("ci", max_examples=100)
settings.register_profile("debug", max_examples=1000, verbosity=Verbosity.verbose)


class FakeClock:
    """Manually advanced clock for deterministic expiration tests"""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "redis"])
def backend(request):
    """Each backend implementation, isolated per test"""
    if request.param == "memory":
        return MemoryCacheBackend()
    return FakeRedisCacheBackend(server=fakeredis.FakeServer())


@pytest.fixture
def pool(backend, clock):
    return CachePool(backend, clock=clock)


@pytest.fixture
def reset_config(monkeypatch):
    """Keep the global config and CACHEPOOL_* variables out of tests"""
    for var in ("CACHEPOOL_BACKEND", "CACHEPOOL_REDIS_URL", "CACHEPOOL_DEFAULT_TTL"):
        monkeypatch.delenv(var, raising=False)
    clear_config()
    yield
    clear_config()
