"""
Caching layer for the coupon catalog
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from src.domain.entities.coupon import Coupon
from src.domain.repositories.coupon_repository import CouponRepository
from src.domain.value_objects.coupon_code import CouponCode
from src.infrastructure.utilities.constants import CacheSettings

logger = logging.getLogger(__name__)

ACTIVE_COUPONS_KEY = "coupons:active"


class InMemoryCache:
    """Simple in-memory cache with TTL support"""

    def __init__(
        self,
        default_ttl: int = CacheSettings.COUPON_CATALOG_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "deletes": 0,
        }

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        with self._lock:
            entry = self._cache.get(key)
            if entry is not None:
                if entry["expires_at"] > self._clock():
                    self._stats["hits"] += 1
                    return entry["value"]
                del self._cache[key]

            self._stats["misses"] += 1
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache"""
        if ttl is None:
            ttl = self._default_ttl

        with self._lock:
            now = self._clock()
            self._cache[key] = {
                "value": value,
                "expires_at": now + ttl,
                "created_at": now,
            }
            self._stats["sets"] += 1

    def delete(self, key: str) -> bool:
        """Delete key from cache"""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                self._stats["deletes"] += 1
                return True
            return False

    def clear(self) -> None:
        """Clear all cache entries"""
        with self._lock:
            self._cache.clear()
            self._stats = {k: 0 for k in self._stats}

    def cleanup_expired(self) -> int:
        """Remove expired entries and return count removed"""
        with self._lock:
            current_time = self._clock()
            expired_keys = [
                key
                for key, entry in self._cache.items()
                if entry["expires_at"] <= current_time
            ]

            for key in expired_keys:
                del self._cache[key]

            return len(expired_keys)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        total_requests = self._stats["hits"] + self._stats["misses"]
        hit_rate = (
            (self._stats["hits"] / total_requests * 100) if total_requests > 0 else 0
        )

        return {
            **self._stats,
            "total_requests": total_requests,
            "hit_rate": round(hit_rate, 2),
            "cache_size": len(self._cache),
        }


class CachedCouponRepository(CouponRepository):
    """
    Coupon repository that keeps the catalog fresh for a TTL

    The cached catalog is the set of active coupons; the date window is
    re-checked against ``now`` on every read so a coupon expiring inside the
    TTL disappears on time. Code lookups and usage counts always hit the
    wrapped repository because apply-time validation must see current data.
    """

    def __init__(self, repository: CouponRepository, cache: Optional[InMemoryCache] = None):
        self._repository = repository
        self._cache = cache or InMemoryCache()
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_active(self, now: datetime) -> List[Coupon]:
        cached = self._cache.get(ACTIVE_COUPONS_KEY)
        if cached is None:
            self._logger.debug("Coupon catalog cache miss")
            cached = await self._repository.find_active(now)
            self._cache.set(ACTIVE_COUPONS_KEY, cached)
        return [coupon for coupon in cached if coupon.is_live(now)]

    async def find_by_code(self, code: CouponCode) -> Optional[Coupon]:
        return await self._repository.find_by_code(code)

    async def count_customer_usage(self, coupon_id: str, customer_id: str) -> int:
        return await self._repository.count_customer_usage(coupon_id, customer_id)

    def invalidate(self) -> None:
        """Force the next catalog read to hit the wrapped repository"""
        self._cache.delete(ACTIVE_COUPONS_KEY)
