"""
Order pricing summary

Combines subtotal, delivery quote and active discount into the payable
amount. Computed at display time and never persisted.
"""

from dataclasses import dataclass
from typing import Optional

from src.domain.services.delivery_fee_calculator import DeliveryFeeQuote
from src.domain.value_objects.money import Money


def calculate_grand_total(subtotal: Money, delivery_fee: Money, discount: Money) -> Money:
    """``subtotal + delivery_fee - discount`` clamped at zero"""
    amount = subtotal.amount + delivery_fee.amount - discount.amount
    if amount < 0:
        return Money.zero(subtotal.currency)
    return Money(amount, subtotal.currency)


@dataclass(frozen=True)
class OrderPricing:
    """Everything a cart or checkout surface shows about the order amount"""

    item_subtotal: Money
    delivery: DeliveryFeeQuote
    discount_amount: Money
    grand_total: Optional[Money]
    discount_code: Optional[str] = None

    @property
    def is_calculating(self) -> bool:
        return self.delivery.is_calculating

    @property
    def total_savings(self) -> Money:
        """Coupon discount plus waived delivery fees"""
        return self.discount_amount + self.delivery.delivery_savings

    @property
    def can_checkout(self) -> bool:
        """Checkout is blocked until every amount is known"""
        return self.grand_total is not None and self.item_subtotal.is_positive()


def price_order(
    subtotal: Money,
    delivery: DeliveryFeeQuote,
    discount_amount: Money,
    discount_code: Optional[str] = None,
) -> OrderPricing:
    """Build the order summary; the grand total stays unknown while delivery is pending"""
    grand_total = None
    if not delivery.is_calculating and delivery.total_delivery_fee is not None:
        grand_total = calculate_grand_total(subtotal, delivery.total_delivery_fee, discount_amount)
    return OrderPricing(
        item_subtotal=subtotal,
        delivery=delivery,
        discount_amount=discount_amount,
        grand_total=grand_total,
        discount_code=discount_code,
    )
