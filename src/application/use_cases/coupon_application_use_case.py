"""
Coupon application use case

Lists the coupon catalog against the current cart and applies or removes
the session discount.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional

from src.application.dtos.pricing_dtos import CouponListResponse, CouponOperationResponse
from src.application.request_guard import LatestRequestGuard
from src.application.state.cart_store import CartState, CartStore
from src.application.state.discount_store import DiscountStore
from src.domain.entities.coupon import Coupon
from src.domain.repositories.coupon_repository import CouponRepository
from src.domain.services.coupon_eligibility import check_coupon_eligibility, evaluate_coupons
from src.infrastructure.utilities.exceptions import (
    CartEmptyError,
    CouponRejectedError,
    DataFetchError,
    ErrorReporter,
)
from src.infrastructure.logging.logging_config import get_structured_logger
from src.infrastructure.utilities.helpers import utc_now
from src.services.coupon_validation_service import CouponValidationService

logger = logging.getLogger(__name__)
audit_logger = get_structured_logger("coupon_audit")


class CouponApplicationUseCase:
    """
    Use case for coupon selection

    Handles:
    1. Listing eligible and ineligible coupons for the cart
    2. Applying a coupon code after server-side validation
    3. Removing the applied coupon

    With a ``cart_store`` the coupon is applied to the cart as it stands
    once validation returns, not to the snapshot the request started from.
    """

    def __init__(
        self,
        coupon_repository: CouponRepository,
        validation_service: CouponValidationService,
        discount_store: DiscountStore,
        cart_store: Optional[CartStore] = None,
    ):
        self._coupon_repository = coupon_repository
        self._validation_service = validation_service
        self._discount_store = discount_store
        self._cart_store = cart_store
        self._list_guard = LatestRequestGuard()
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_coupons(
        self,
        cart: CartState,
        customer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CouponListResponse:
        """
        Evaluate the live coupon catalog against ``cart``

        A listing overtaken by a newer call returns ``stale=True`` instead of
        an evaluation of the older cart.
        """
        now = now or utc_now()
        token = self._list_guard.begin()
        self._logger.info(
            "🎟️ LIST COUPONS: customer=%s subtotal=%s", customer_id, cart.subtotal
        )

        try:
            coupons = await self._coupon_repository.find_active(now)
            customer_usage = None
            if customer_id is not None:
                customer_usage = await self._customer_usage(coupons, customer_id)
        except DataFetchError as e:
            self._logger.error("💥 COUPON FETCH FAILED: %s", e)
            return CouponListResponse(
                success=False,
                error_message=e.user_message,
                retryable=e.retryable,
                stale=not self._list_guard.is_current(token),
            )

        if not self._list_guard.is_current(token):
            self._logger.info("⏭️ COUPON LIST DISCARDED: request %d superseded", token)
            return CouponListResponse(success=False, stale=True)

        evaluation = evaluate_coupons(coupons, cart.lines, cart.subtotal, now, customer_usage)
        self._logger.info(
            "✅ COUPONS LISTED: eligible=%d ineligible=%d",
            len(evaluation.eligible),
            len(evaluation.ineligible),
        )
        return CouponListResponse(success=True, evaluation=evaluation)

    async def apply_coupon(
        self,
        code: str,
        cart: CartState,
        customer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CouponOperationResponse:
        """Validate ``code`` against the stored coupon and make it the session discount"""
        self._logger.info("🎟️ APPLY COUPON: code=%s customer=%s", code, customer_id)

        try:
            if cart.is_empty:
                raise CartEmptyError()

            result = await self._validation_service.validate(
                code, cart.subtotal, customer_id=customer_id, now=now
            )

            # The cart may have changed while validation was in flight
            current = self._current_cart(cart)
            if current.is_empty:
                raise CartEmptyError()

            eligibility = check_coupon_eligibility(result.coupon, current.lines, current.subtotal)
            if not eligibility.is_eligible:
                raise CouponRejectedError(result.coupon.code.value, eligibility.reason)

            state = self._discount_store.apply_coupon(result.coupon, current.subtotal)

        except (CouponRejectedError, CartEmptyError) as e:
            ErrorReporter.report_business_error(e, customer_id)
            return CouponOperationResponse(
                success=False, error_message=e.user_message, error_code=e.error_code
            )
        except DataFetchError as e:
            self._logger.error("💥 COUPON VALIDATION FAILED: %s", e)
            return CouponOperationResponse(
                success=False, error_message=e.user_message, error_code=e.error_code
            )

        amount = state.discount_amount_in(current.currency)
        self._logger.info("✅ COUPON APPLIED: code=%s amount=%s", state.code, amount)
        audit_logger.info(
            "coupon_applied",
            code=state.code,
            customer_id=customer_id,
            discount=str(amount),
        )
        return CouponOperationResponse(success=True, discount=state, discount_amount=amount)

    def remove_coupon(self, cart: Optional[CartState] = None) -> CouponOperationResponse:
        """Drop the session discount"""
        state = self._discount_store.remove_discount()
        currency = self._current_cart(cart or CartState.empty()).currency
        self._logger.info("🗑️ COUPON REMOVED")
        audit_logger.info("coupon_removed")
        return CouponOperationResponse(
            success=True, discount=state, discount_amount=state.discount_amount_in(currency)
        )

    def _current_cart(self, fallback: CartState) -> CartState:
        if self._cart_store is None:
            return fallback
        return self._cart_store.state

    async def _customer_usage(self, coupons: List[Coupon], customer_id: str) -> Dict[str, int]:
        counts = await asyncio.gather(
            *(
                self._coupon_repository.count_customer_usage(coupon.id, customer_id)
                for coupon in coupons
            )
        )
        return {coupon.id: count for coupon, count in zip(coupons, counts)}
