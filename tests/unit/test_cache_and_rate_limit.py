"""Unit tests for the Redis cache wrapper and the hybrid rate limiter."""

from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from app import rate_limiter
from app.cache import Cache


class FakeRedis:
    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def set(self, key, value, ex=None):
        self.store[key] = value

    def ttl(self, key):
        return 60 if key in self.store else -2

    def delete(self, key):
        self.store.pop(key, None)


@pytest.fixture(autouse=True)
def reset_rate_limit_memory():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


def test_disabled_cache_is_a_noop():
    """Test a disabled cache never touches Redis."""
    cache = Cache(enabled=False)

    assert cache.set("k", {"a": 1}) is False
    assert cache.get("k") is None
    assert cache.delete("k") is False


def test_cache_round_trip_with_redis():
    """Test values are JSON encoded into Redis and decoded back."""
    cache = Cache(enabled=True)
    cache.redis_client = FakeRedis()

    assert cache.set("business_details:b1", {"name": "Salon", "rating": 4.5}) is True
    assert cache.get("business_details:b1") == {"name": "Salon", "rating": 4.5}

    cache.delete("business_details:b1")
    assert cache.get("business_details:b1") is None


def test_cache_degrades_when_redis_fails():
    """Test Redis errors are logged and treated as misses."""
    cache = Cache(enabled=True)
    cache.redis_client = Mock(get=Mock(side_effect=ConnectionError("down")))

    assert cache.get("anything") is None


def test_rate_limit_allows_up_to_limit():
    """Test the window admits exactly `limit` requests."""
    client = FakeRedis()
    results = [rate_limiter.check_rate_limit("test:1.2.3.4", 3, 60, client)[0] for _ in range(4)]

    assert results == [True, True, True, False]


def test_rate_limit_fails_closed_on_error(monkeypatch):
    """Test an internal limiter failure denies the request."""
    monkeypatch.setattr(rate_limiter, "cleanup_expired_cache", Mock(side_effect=RuntimeError("boom")))

    is_allowed, _, _ = rate_limiter.check_rate_limit("test:key", 10, 60, FakeRedis())

    assert is_allowed is False


@pytest.mark.asyncio
async def test_rate_limit_dependency_raises_429(monkeypatch):
    """Test exceeding the limit returns 429 with Retry-After."""
    monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: FakeRedis())
    request = Mock()
    request.headers = {"X-Forwarded-For": "9.9.9.9"}

    await rate_limiter.rate_limit_dependency(request, 1, 60, "unit")
    with pytest.raises(HTTPException) as exc_info:
        await rate_limiter.rate_limit_dependency(request, 1, 60, "unit")

    assert exc_info.value.status_code == 429
    assert "Retry-After" in exc_info.value.headers


@pytest.mark.asyncio
async def test_rate_limit_dependency_unavailable_redis_is_503(monkeypatch):
    """Test an unreachable Redis fails closed with 503."""
    monkeypatch.setattr(rate_limiter, "get_redis_client", Mock(side_effect=ConnectionError("down")))
    request = Mock()
    request.headers = {}

    with pytest.raises(HTTPException) as exc_info:
        await rate_limiter.rate_limit_dependency(request, 10, 60, "unit")

    assert exc_info.value.status_code == 503
