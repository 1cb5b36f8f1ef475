# pylint: disable=too-many-instance-attributes
"""
Coupon domain entity

Promotional coupon as published in the coupon catalog.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from src.domain.value_objects.coupon_code import CouponCode
from src.domain.value_objects.money import Money


class DiscountType(Enum):
    """How a coupon reduces the order amount"""

    PERCENTAGE = "percentage"
    FLAT = "flat"
    FREE_SHIPPING = "free_shipping"


class ApplicableTo(Enum):
    """Which part of the cart a coupon applies to"""

    ALL = "all"
    VENDOR = "vendor"
    CATEGORY = "category"
    PRODUCT = "product"


@dataclass
class Coupon:
    """
    Coupon domain entity

    ``discount_value`` is a percentage for percentage coupons and an amount in
    the order currency for flat coupons.
    """

    id: str
    code: CouponCode
    discount_type: DiscountType
    discount_value: Decimal
    min_order_amount: Money
    start_date: datetime
    end_date: datetime
    max_discount_amount: Optional[Money] = None
    applicable_to: ApplicableTo = ApplicableTo.ALL
    applicable_id: Optional[str] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    usage_limit_per_user: int = 1
    includes_free_delivery: bool = False
    is_active: bool = True

    def __post_init__(self):
        """Validate the coupon after initialization"""
        if not isinstance(self.code, CouponCode):
            self.code = CouponCode(self.code)

        if not isinstance(self.discount_value, Decimal):
            self.discount_value = Decimal(str(self.discount_value))

        if self.discount_value < 0:
            raise ValueError("Discount value cannot be negative")

        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100")

        if self.end_date < self.start_date:
            raise ValueError("Coupon end date cannot be before its start date")

        if self.usage_count < 0:
            raise ValueError("Usage count cannot be negative")

        if self.usage_limit is not None and self.usage_count > self.usage_limit:
            raise ValueError("Usage count cannot exceed usage limit")

        if self.applicable_to != ApplicableTo.ALL and not self.applicable_id:
            raise ValueError(
                f"{self.applicable_to.value} coupons require an applicable id"
            )

    def is_within_window(self, now: Optional[datetime] = None) -> bool:
        """Check if the coupon is inside its active date window"""
        now = now or datetime.now(UTC)
        return self.start_date <= now <= self.end_date

    def is_live(self, now: Optional[datetime] = None) -> bool:
        """Active flag set and inside the date window"""
        return self.is_active and self.is_within_window(now)

    def is_fully_redeemed(self) -> bool:
        """Check if the global usage limit has been reached"""
        return self.usage_limit is not None and self.usage_count >= self.usage_limit

    @property
    def remaining_uses(self) -> Optional[int]:
        """Uses left before the global limit, None when unlimited"""
        if self.usage_limit is None:
            return None
        return self.usage_limit - self.usage_count

    @property
    def is_scoped(self) -> bool:
        """Check if the coupon is restricted to a vendor, category or product"""
        return self.applicable_to != ApplicableTo.ALL

    def __str__(self) -> str:
        return f"Coupon(code={self.code}, type={self.discount_type.value})"
