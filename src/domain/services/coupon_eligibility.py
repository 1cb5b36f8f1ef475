"""
Coupon eligibility and discount engine

Splits the coupon catalog into coupons the customer can apply right now and
coupons they cannot, computing the discount each one would give. This is a
pre-filter for display; the server-side validation at apply time stays
authoritative.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from src.domain.entities.cart_line import CartLine
from src.domain.entities.coupon import ApplicableTo, Coupon, DiscountType
from src.domain.services.discount_calculator import calculate_coupon_discount
from src.domain.value_objects.money import Money
from src.infrastructure.utilities.constants import CouponMessages
from src.infrastructure.utilities.helpers import format_price

logger = logging.getLogger(__name__)

_SCOPE_MISS_MESSAGES = {
    ApplicableTo.VENDOR: CouponMessages.NO_VENDOR_ITEMS,
    ApplicableTo.CATEGORY: CouponMessages.NO_CATEGORY_ITEMS,
    ApplicableTo.PRODUCT: CouponMessages.NO_PRODUCT_ITEMS,
}


@dataclass(frozen=True)
class CouponEligibility:
    """Outcome of the eligibility checks for one coupon"""

    is_eligible: bool
    reason: Optional[str] = None
    shortfall: Optional[Money] = None
    conflicting_items: Tuple[CartLine, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EvaluatedCoupon:
    """A coupon together with its eligibility and the discount it yields"""

    coupon: Coupon
    discount: Money
    eligibility: CouponEligibility

    @property
    def is_eligible(self) -> bool:
        return self.eligibility.is_eligible


@dataclass(frozen=True)
class CouponEvaluation:
    """
    Partitioned coupon catalog

    ``eligible`` is ordered best offer first. ``ineligible`` is ordered by how
    close the customer is to qualifying: smallest order shortfall first, then
    coupons blocked for other reasons. Ties keep catalog order.
    """

    eligible: Tuple[EvaluatedCoupon, ...] = ()
    ineligible: Tuple[EvaluatedCoupon, ...] = ()

    @property
    def best(self) -> Optional[EvaluatedCoupon]:
        """Eligible coupon with the largest discount"""
        return self.eligible[0] if self.eligible else None

    def find(self, code: str) -> Optional[EvaluatedCoupon]:
        """Look up an evaluated coupon by code"""
        code = code.strip().upper()
        for evaluated in self.eligible + self.ineligible:
            if evaluated.coupon.code.value == code:
                return evaluated
        return None


def line_matches_scope(line: CartLine, coupon: Coupon) -> bool:
    """Check if a cart line falls inside the coupon's vendor/category/product scope"""
    if coupon.applicable_to == ApplicableTo.ALL:
        return True
    if coupon.applicable_to == ApplicableTo.VENDOR:
        return line.vendor_id == coupon.applicable_id
    if coupon.applicable_to == ApplicableTo.CATEGORY:
        return line.category_id == coupon.applicable_id
    return line.product_id == coupon.applicable_id


def find_conflicting_items(coupon: Coupon, lines: Iterable[CartLine]) -> List[CartLine]:
    """Cart lines outside the coupon's scope, i.e. the ones to remove to qualify"""
    if not coupon.is_scoped:
        return []
    return [line for line in lines if not line_matches_scope(line, coupon)]


def check_coupon_eligibility(
    coupon: Coupon,
    lines: Sequence[CartLine],
    subtotal: Money,
    customer_usage_count: Optional[int] = None,
) -> CouponEligibility:
    """
    Run the eligibility checks for a coupon already known to be live

    Checks run in order and the first failure is reported: global usage limit,
    per-customer usage limit, minimum order amount, scope match.
    """
    if coupon.is_fully_redeemed():
        return CouponEligibility(False, CouponMessages.FULLY_REDEEMED)

    if (
        customer_usage_count is not None
        and customer_usage_count >= coupon.usage_limit_per_user
    ):
        return CouponEligibility(False, CouponMessages.ALREADY_USED)

    if subtotal < coupon.min_order_amount:
        shortfall = subtotal.shortfall_to(coupon.min_order_amount)
        return CouponEligibility(
            False,
            CouponMessages.MIN_ORDER_SHORTFALL.format(
                shortfall=format_price(shortfall.amount, shortfall.currency)
            ),
            shortfall=shortfall,
        )

    if coupon.is_scoped and not any(line_matches_scope(line, coupon) for line in lines):
        return CouponEligibility(
            False,
            _SCOPE_MISS_MESSAGES[coupon.applicable_to],
            conflicting_items=tuple(find_conflicting_items(coupon, lines)),
        )

    return CouponEligibility(True)


def _ineligible_sort_key(evaluated: EvaluatedCoupon):
    shortfall = evaluated.eligibility.shortfall
    if shortfall is None:
        return (1, Decimal("0"))
    return (0, shortfall.amount)


def evaluate_coupons(
    coupons: Iterable[Coupon],
    lines: Sequence[CartLine],
    subtotal: Money,
    now: Optional[datetime] = None,
    customer_usage: Optional[Mapping[str, int]] = None,
) -> CouponEvaluation:
    """
    Partition ``coupons`` into eligible and ineligible for the current cart

    Coupons that are inactive or outside their date window are left out of
    both lists. ``customer_usage`` maps coupon ids to how often the customer
    already redeemed them; without it the per-customer limit is not checked.
    """
    now = now or datetime.now(UTC)
    eligible: List[EvaluatedCoupon] = []
    ineligible: List[EvaluatedCoupon] = []
    skipped = 0

    for coupon in coupons:
        if not coupon.is_live(now):
            skipped += 1
            continue

        usage_count = None
        if customer_usage is not None:
            usage_count = customer_usage.get(coupon.id, 0)

        eligibility = check_coupon_eligibility(coupon, lines, subtotal, usage_count)
        evaluated = EvaluatedCoupon(
            coupon=coupon,
            discount=calculate_coupon_discount(coupon, subtotal),
            eligibility=eligibility,
        )
        (eligible if eligibility.is_eligible else ineligible).append(evaluated)

    eligible.sort(key=lambda evaluated: evaluated.discount.amount, reverse=True)
    ineligible.sort(key=_ineligible_sort_key)

    logger.debug(
        "Coupons evaluated: eligible=%d ineligible=%d skipped=%d subtotal=%s",
        len(eligible),
        len(ineligible),
        skipped,
        subtotal,
    )
    return CouponEvaluation(eligible=tuple(eligible), ineligible=tuple(ineligible))


def coupon_suggestions(evaluated: EvaluatedCoupon) -> List[str]:
    """What the customer could do to make an ineligible coupon apply"""
    suggestions: List[str] = []
    eligibility = evaluated.eligibility
    coupon = evaluated.coupon

    if eligibility.is_eligible:
        return suggestions

    if eligibility.shortfall is not None and eligibility.shortfall.is_positive():
        suggestions.append(
            f"Add {format_price(eligibility.shortfall.amount, eligibility.shortfall.currency)} "
            "worth of items to your cart"
        )

    if eligibility.conflicting_items:
        names = ", ".join(line.name for line in eligibility.conflicting_items)
        suggestions.append(f"Remove: {names}")

    if coupon.applicable_to == ApplicableTo.PRODUCT and eligibility.shortfall is None:
        suggestions.append("Add the required product to your cart")
    elif coupon.applicable_to == ApplicableTo.CATEGORY and eligibility.shortfall is None:
        suggestions.append("Add items from the required category")
    elif coupon.applicable_to == ApplicableTo.VENDOR and eligibility.shortfall is None:
        suggestions.append("Add items from the required store")

    return suggestions


def describe_coupon(coupon: Coupon) -> str:
    """Short label such as ``FREE DELIVERY + 20% OFF``"""
    value = coupon.discount_value
    currency = coupon.min_order_amount.currency

    if coupon.discount_type == DiscountType.PERCENTAGE:
        label = f"{value.normalize():f}% OFF"
    elif coupon.discount_type == DiscountType.FLAT and value > 0:
        label = f"{format_price(value, currency)} OFF"
    else:
        label = None

    if coupon.includes_free_delivery or coupon.discount_type == DiscountType.FREE_SHIPPING:
        return f"FREE DELIVERY + {label}" if label else "FREE DELIVERY"
    return label or "OFFER"
