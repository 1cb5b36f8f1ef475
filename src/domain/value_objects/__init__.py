"""
Domain value objects package

Contains immutable value objects that represent concepts in the pricing domain.
"""

from .coupon_code import CouponCode
from .money import DEFAULT_CURRENCY, Money

__all__ = [
    "CouponCode",
    "DEFAULT_CURRENCY",
    "Money",
]
