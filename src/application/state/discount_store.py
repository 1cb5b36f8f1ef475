# pylint: disable=too-many-arguments
"""
Discount session store

Holds the single coupon applied to the current session. The stored amount is
recomputed with the coupon's own rule every time the cart changes, and the
discount is dropped automatically once the cart no longer satisfies the
coupon's minimum order or scope.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, Union

from src.application.state.cart_store import CartState, CartStore
from src.domain.entities.coupon import ApplicableTo, Coupon, DiscountType
from src.domain.services.coupon_eligibility import line_matches_scope
from src.domain.services.discount_calculator import calculate_discount
from src.domain.value_objects.money import Money
from src.infrastructure.utilities.constants import CouponMessages
from src.infrastructure.utilities.exceptions import (
    CouponRejectedError,
    ValidationError,
    validate_and_raise,
)
from src.infrastructure.utilities.helpers import format_price

logger = logging.getLogger(__name__)


class AppliedDiscountType(Enum):
    """Discount rule of an applied coupon"""

    PERCENT = "percent"
    FLAT = "flat"

    @classmethod
    def from_discount_type(cls, discount_type: DiscountType) -> "AppliedDiscountType":
        """Map a catalog discount type; free shipping applies as a zero flat discount"""
        if discount_type == DiscountType.PERCENTAGE:
            return cls.PERCENT
        return cls.FLAT

    def to_discount_type(self) -> DiscountType:
        if self == AppliedDiscountType.PERCENT:
            return DiscountType.PERCENTAGE
        return DiscountType.FLAT


@dataclass(frozen=True)
class AppliedDiscount:
    """The active coupon and everything needed to recompute its amount"""

    code: str
    type: AppliedDiscountType
    computed_amount: Money
    snapshot_subtotal: Money
    discount_value: Decimal
    max_discount: Optional[Money] = None
    min_order: Optional[Money] = None
    applicable_to: ApplicableTo = ApplicableTo.ALL
    applicable_id: Optional[str] = None
    includes_free_delivery: bool = False

    def amount_for(self, subtotal: Money) -> Money:
        """Amount this discount yields on ``subtotal``"""
        return calculate_discount(
            self.type.to_discount_type(), self.discount_value, subtotal, self.max_discount
        )


@dataclass(frozen=True)
class DiscountState:
    """
    Discount session snapshot

    ``invalidation_reason`` explains why the last discount was removed
    automatically; it is cleared by any explicit apply or remove.
    """

    active: Optional[AppliedDiscount] = None
    invalidation_reason: Optional[str] = None

    @property
    def discount_amount(self) -> Money:
        if self.active is None:
            return Money.zero()
        return self.active.computed_amount

    def discount_amount_in(self, currency: str) -> Money:
        """Active amount, or zero in ``currency`` when nothing is applied"""
        if self.active is None:
            return Money.zero(currency)
        return self.active.computed_amount

    @property
    def has_free_delivery(self) -> bool:
        return self.active is not None and self.active.includes_free_delivery

    @property
    def code(self) -> Optional[str]:
        return self.active.code if self.active else None


def apply_discount(
    state: DiscountState,
    code: str,
    discount_type: Union[AppliedDiscountType, str],
    subtotal: Money,
    value: Union[Decimal, int, float, str],
    max_discount: Optional[Money] = None,
    min_order: Optional[Money] = None,
    applicable_to: Optional[ApplicableTo] = None,
    applicable_id: Optional[str] = None,
    includes_free_delivery: bool = False,
) -> DiscountState:
    """
    Apply a coupon against ``subtotal``, replacing any active one

    Raises ``ValidationError`` for a malformed rule and ``CouponRejectedError``
    when the subtotal is below ``min_order``.
    """
    try:
        discount_type = AppliedDiscountType(discount_type)
    except ValueError as e:
        raise ValidationError(
            f"Unknown discount type: {discount_type}", field="discount_type"
        ) from e

    code = code.strip().upper()
    validate_and_raise(bool(code), ValidationError, "Coupon code cannot be empty", field="code")

    value = Decimal(str(value))
    validate_and_raise(
        value >= 0, ValidationError, "Discount value cannot be negative", field="value"
    )
    validate_and_raise(
        discount_type != AppliedDiscountType.PERCENT or value <= 100,
        ValidationError,
        "Percentage discount cannot exceed 100",
        field="value",
    )

    if min_order is not None and subtotal < min_order:
        raise CouponRejectedError(
            code,
            CouponMessages.MIN_ORDER_NOT_MET.format(
                minimum=format_price(min_order.amount, min_order.currency)
            ),
        )

    applied = AppliedDiscount(
        code=code,
        type=discount_type,
        computed_amount=Money.zero(subtotal.currency),
        snapshot_subtotal=subtotal,
        discount_value=value,
        max_discount=max_discount,
        min_order=min_order,
        applicable_to=applicable_to or ApplicableTo.ALL,
        applicable_id=applicable_id,
        includes_free_delivery=includes_free_delivery,
    )
    applied = replace(applied, computed_amount=applied.amount_for(subtotal))

    logger.info(
        "Discount applied: code=%s type=%s amount=%s subtotal=%s",
        code,
        discount_type.value,
        applied.computed_amount,
        subtotal,
    )
    return DiscountState(active=applied)


def apply_coupon(state: DiscountState, coupon: Coupon, subtotal: Money) -> DiscountState:
    """Apply a catalog coupon"""
    value = coupon.discount_value
    if coupon.discount_type == DiscountType.FREE_SHIPPING:
        value = Decimal("0")

    return apply_discount(
        state,
        coupon.code.value,
        AppliedDiscountType.from_discount_type(coupon.discount_type),
        subtotal,
        value,
        max_discount=coupon.max_discount_amount,
        min_order=coupon.min_order_amount,
        applicable_to=coupon.applicable_to,
        applicable_id=coupon.applicable_id,
        includes_free_delivery=(
            coupon.includes_free_delivery or coupon.discount_type == DiscountType.FREE_SHIPPING
        ),
    )


def remove_discount(state: DiscountState) -> DiscountState:
    """Clear the active discount unconditionally"""
    if state.active is None and state.invalidation_reason is None:
        return state
    return DiscountState()


def recompute_for_cart(state: DiscountState, cart: CartState) -> DiscountState:
    """
    Keep the active discount consistent with the cart

    The amount is recomputed against the new subtotal. The discount is
    removed when the cart is empty, falls below the minimum order, or no
    longer holds any line inside the coupon's scope.
    """
    applied = state.active
    if applied is None:
        return state

    reason = _invalidation_reason(applied, cart)
    if reason is not None:
        logger.info("Discount %s removed: %s", applied.code, reason)
        return DiscountState(invalidation_reason=reason)

    subtotal = cart.subtotal
    if subtotal == applied.snapshot_subtotal:
        return state

    updated = replace(
        applied,
        computed_amount=applied.amount_for(subtotal),
        snapshot_subtotal=subtotal,
    )
    logger.debug(
        "Discount %s recomputed: %s -> %s", applied.code, applied.computed_amount, updated.computed_amount
    )
    return DiscountState(active=updated)


def _invalidation_reason(applied: AppliedDiscount, cart: CartState) -> Optional[str]:
    if cart.is_empty:
        return "Cart is empty"

    if applied.min_order is not None and cart.subtotal < applied.min_order:
        return CouponMessages.MIN_ORDER_NOT_MET.format(
            minimum=format_price(applied.min_order.amount, applied.min_order.currency)
        )

    if applied.applicable_to != ApplicableTo.ALL:
        scope = _ScopeView(applied.applicable_to, applied.applicable_id)
        if not any(line_matches_scope(line, scope) for line in cart.lines):
            return CouponMessages.SCOPE_NO_LONGER_MATCHES

    return None


@dataclass(frozen=True)
class _ScopeView:
    """Scope fields of an applied discount, shaped like a coupon for scope matching"""

    applicable_to: ApplicableTo
    applicable_id: Optional[str]


class DiscountStore:
    """Holds the discount session snapshot"""

    def __init__(self, initial: Optional[DiscountState] = None):
        self._state = initial or DiscountState()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def state(self) -> DiscountState:
        return self._state

    def apply_discount(self, code: str, discount_type, subtotal: Money, value, **kwargs) -> DiscountState:
        self._state = apply_discount(self._state, code, discount_type, subtotal, value, **kwargs)
        return self._state

    def apply_coupon(self, coupon: Coupon, subtotal: Money) -> DiscountState:
        self._state = apply_coupon(self._state, coupon, subtotal)
        return self._state

    def remove_discount(self) -> DiscountState:
        self._state = remove_discount(self._state)
        return self._state

    def sync_with_cart(self, cart: CartState) -> DiscountState:
        self._state = recompute_for_cart(self._state, cart)
        return self._state

    def bind(self, cart_store: CartStore) -> None:
        """Recompute automatically whenever ``cart_store`` changes"""
        self.unbind()
        self._unsubscribe = cart_store.subscribe(
            lambda _previous, current: self.sync_with_cart(current)
        )
        self.sync_with_cart(cart_store.state)

    def unbind(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
