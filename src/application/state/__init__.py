"""
Client-side state

Immutable cart and discount snapshots with the reducers that produce them.
"""

from .cart_store import (
    CartState,
    CartStore,
    add_to_cart,
    clear_cart,
    remove_from_cart,
    reprice,
    update_quantity,
)
from .discount_store import (
    AppliedDiscount,
    AppliedDiscountType,
    DiscountState,
    DiscountStore,
    apply_coupon,
    apply_discount,
    recompute_for_cart,
    remove_discount,
)

__all__ = [
    "AppliedDiscount",
    "AppliedDiscountType",
    "CartState",
    "CartStore",
    "DiscountState",
    "DiscountStore",
    "add_to_cart",
    "apply_coupon",
    "apply_discount",
    "clear_cart",
    "recompute_for_cart",
    "remove_discount",
    "remove_from_cart",
    "reprice",
    "update_quantity",
]
