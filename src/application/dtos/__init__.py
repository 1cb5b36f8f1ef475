"""
Application DTOs
"""

from .pricing_dtos import (
    CartSyncResponse,
    CheckoutPricingRequest,
    CouponListResponse,
    CouponOperationResponse,
    PricingResponse,
)

__all__ = [
    "CartSyncResponse",
    "CheckoutPricingRequest",
    "CouponListResponse",
    "CouponOperationResponse",
    "PricingResponse",
]
