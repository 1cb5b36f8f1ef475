"""
Coupon repository interface

Defines the contract for coupon catalog access.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.domain.entities.coupon import Coupon
from src.domain.value_objects.coupon_code import CouponCode


class CouponRepository(ABC):
    """Repository interface for coupon operations"""

    @abstractmethod
    async def find_active(self, now: datetime) -> List[Coupon]:
        """Find coupons flagged active whose date window contains ``now``"""

    @abstractmethod
    async def find_by_code(self, code: CouponCode) -> Optional[Coupon]:
        """Find a coupon by its code regardless of state"""

    @abstractmethod
    async def count_customer_usage(self, coupon_id: str, customer_id: str) -> int:
        """Count how many times a customer has redeemed a coupon"""
