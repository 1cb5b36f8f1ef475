"""
Use Cases

Contains the business use cases of the application.
Each use case represents a single business operation.
"""

from .cart_price_sync_use_case import CartPriceSyncUseCase
from .checkout_pricing_use_case import CheckoutPricingUseCase
from .coupon_application_use_case import CouponApplicationUseCase

__all__ = [
    'CartPriceSyncUseCase',
    'CheckoutPricingUseCase',
    'CouponApplicationUseCase',
]
