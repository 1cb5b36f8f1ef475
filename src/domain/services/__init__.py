"""
Domain services

Pure pricing computations over cart, coupon, vendor and address data.
"""

from .coupon_eligibility import (
    CouponEligibility,
    CouponEvaluation,
    EvaluatedCoupon,
    check_coupon_eligibility,
    coupon_suggestions,
    describe_coupon,
    evaluate_coupons,
    find_conflicting_items,
)
from .delivery_fee_calculator import (
    DeliveryFeeCalculator,
    DeliveryFeeQuote,
    DeliveryFeeRequest,
    DistanceFeeStrategy,
    FeeStrategy,
    FlatFeeStrategy,
    FreeDeliveryReason,
    VendorDeliveryFee,
)
from .discount_calculator import calculate_coupon_discount, calculate_discount
from .order_pricing import OrderPricing, calculate_grand_total, price_order

__all__ = [
    "CouponEligibility",
    "CouponEvaluation",
    "DeliveryFeeCalculator",
    "DeliveryFeeQuote",
    "DeliveryFeeRequest",
    "DistanceFeeStrategy",
    "EvaluatedCoupon",
    "FeeStrategy",
    "FlatFeeStrategy",
    "FreeDeliveryReason",
    "OrderPricing",
    "VendorDeliveryFee",
    "calculate_coupon_discount",
    "calculate_discount",
    "calculate_grand_total",
    "check_coupon_eligibility",
    "coupon_suggestions",
    "describe_coupon",
    "evaluate_coupons",
    "find_conflicting_items",
    "price_order",
]
