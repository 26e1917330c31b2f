"""
Redis caching utilities for public directory reads
Business details and category lists are cached and invalidated on writes
"""
import json
import logging
from typing import Optional, Any

from . import config
from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)


class Cache:
    """Redis cache wrapper with automatic serialization"""

    def __init__(self, enabled: Optional[bool] = None):
        self.redis_client = None
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return config.CACHE_ENABLED if self._enabled is None else self._enabled

    def _get_client(self):
        """Lazy load Redis client"""
        if not self.enabled:
            return None
        if self.redis_client is None:
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"✅ Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"❌ Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache with TTL (defaults to CACHE_TTL_SECONDS)"""
        client = self._get_client()
        if not client:
            return False

        ttl = ttl or config.CACHE_TTL_SECONDS
        try:
            client.setex(key, ttl, json.dumps(value, default=str))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete value from cache"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.delete(key)
            logger.debug(f"✅ Cache DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"❌ Cache delete error for {key}: {e}")
            return False


# Global cache instance
cache = Cache()


def business_details_key(business_id: str) -> str:
    return f"business_details:{business_id}"


def category_list_key(kind: str) -> str:
    return f"categories:{kind}"


def get_business_details_cached(business_id: str) -> Optional[dict]:
    return cache.get(business_details_key(business_id))


def set_business_details_cached(business_id: str, details: dict) -> bool:
    return cache.set(business_details_key(business_id), details)


def invalidate_business_cache(business_id: str) -> bool:
    """Invalidate public details when a business, its services or hours change"""
    return cache.delete(business_details_key(business_id))


def get_categories_cached(kind: str) -> Optional[list]:
    """kind is 'business' or 'service'"""
    return cache.get(category_list_key(kind))


def set_categories_cached(kind: str, categories: list) -> bool:
    return cache.set(category_list_key(kind), categories)


def invalidate_categories_cache(kind: str) -> bool:
    return cache.delete(category_list_key(kind))
