"""
Pricing DTOs

Data Transfer Objects for checkout pricing and coupon operations.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from src.application.state.cart_store import CartState
from src.application.state.discount_store import DiscountState
from src.domain.entities.address import Address
from src.domain.services.coupon_eligibility import CouponEvaluation
from src.domain.services.order_pricing import OrderPricing
from src.domain.value_objects.money import Money


@dataclass
class CheckoutPricingRequest:
    """Request to price the current cart for checkout"""
    customer_id: str
    cart: CartState
    discount: DiscountState = field(default_factory=DiscountState)
    address_id: Optional[str] = None


@dataclass
class PricingResponse:
    """Response for a checkout pricing pass"""
    success: bool
    pricing: Optional[OrderPricing] = None
    selected_address: Optional[Address] = None
    error_message: Optional[str] = None
    retryable: bool = False
    stale: bool = False


@dataclass
class CouponListResponse:
    """Response for listing coupons against the current cart"""
    success: bool
    evaluation: Optional[CouponEvaluation] = None
    error_message: Optional[str] = None
    retryable: bool = False
    stale: bool = False


@dataclass
class CouponOperationResponse:
    """Response for applying or removing a coupon"""
    success: bool
    discount: Optional[DiscountState] = None
    discount_amount: Optional[Money] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None


@dataclass
class CartSyncResponse:
    """Response for refreshing cart prices from the catalog"""
    success: bool
    cart: Optional[CartState] = None
    updated_products: List[str] = field(default_factory=list)
    unavailable_products: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    retryable: bool = False
