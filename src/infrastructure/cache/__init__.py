"""
Cache infrastructure module
"""

from .cache_manager import CachedCouponRepository, InMemoryCache

__all__ = [
    "CachedCouponRepository",
    "InMemoryCache",
]
