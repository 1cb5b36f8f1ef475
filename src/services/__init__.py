"""Business-logic service layer."""

from .coupon_validation_service import CouponValidationResult, CouponValidationService

__all__ = [
    "CouponValidationResult",
    "CouponValidationService",
]
