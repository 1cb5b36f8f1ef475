"""
Discount formulas

Shared by the coupon engine and the discount session so a coupon always
yields the same amount wherever it is shown.
"""

from decimal import Decimal
from typing import Optional

from src.domain.entities.coupon import Coupon, DiscountType
from src.domain.value_objects.money import Money


def percentage_discount(
    subtotal: Money, percent: Decimal, max_discount: Optional[Money] = None
) -> Money:
    """``percent`` of the subtotal, capped at ``max_discount`` when set"""
    amount = subtotal.percentage(percent)
    if max_discount is not None and amount > max_discount:
        return max_discount
    return amount


def flat_discount(subtotal: Money, value: Decimal) -> Money:
    """Flat amount, never more than the subtotal"""
    amount = Money(value, subtotal.currency)
    if amount > subtotal:
        return subtotal
    return amount


def calculate_discount(
    discount_type: DiscountType,
    value: Decimal,
    subtotal: Money,
    max_discount: Optional[Money] = None,
) -> Money:
    """Discount against the item subtotal for a given discount rule"""
    if discount_type == DiscountType.PERCENTAGE:
        return percentage_discount(subtotal, value, max_discount)
    if discount_type == DiscountType.FLAT:
        return flat_discount(subtotal, value)
    # Free shipping only zeroes the delivery fee downstream
    return Money.zero(subtotal.currency)


def calculate_coupon_discount(coupon: Coupon, subtotal: Money) -> Money:
    """Discount a coupon would give on ``subtotal``"""
    return calculate_discount(
        coupon.discount_type,
        coupon.discount_value,
        subtotal,
        coupon.max_discount_amount,
    )
