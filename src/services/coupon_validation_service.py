"""
Coupon validation service

Authoritative check run when a customer applies a coupon code. The coupon
list shown to the customer is only a pre-filter; this validation is always
re-run against the stored coupon before a discount is accepted.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.domain.entities.coupon import Coupon
from src.domain.repositories.coupon_repository import CouponRepository
from src.domain.services.discount_calculator import calculate_coupon_discount
from src.domain.value_objects.coupon_code import CouponCode
from src.domain.value_objects.money import Money
from src.infrastructure.utilities.constants import CouponMessages
from src.infrastructure.utilities.exceptions import CouponRejectedError
from src.infrastructure.utilities.helpers import format_price, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CouponValidationResult:
    """A coupon accepted for an order and the discount it gives"""

    coupon: Coupon
    discount: Money


class CouponValidationService:
    """Validates coupon codes against the stored catalog"""

    def __init__(self, coupon_repository: CouponRepository):
        self._coupon_repository = coupon_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def validate(
        self,
        code: str,
        order_amount: Money,
        customer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CouponValidationResult:
        """
        Validate ``code`` for an order of ``order_amount``

        Raises ``CouponRejectedError`` with a customer-facing reason when the
        coupon cannot be used. Data store failures propagate unchanged.
        """
        now = now or utc_now()
        try:
            coupon_code = CouponCode(code)
        except ValueError as e:
            raise CouponRejectedError(str(code), CouponMessages.NOT_FOUND) from e

        coupon = await self._coupon_repository.find_by_code(coupon_code)
        if coupon is None:
            self._logger.info("Coupon %s not found", coupon_code)
            raise CouponRejectedError(coupon_code.value, CouponMessages.NOT_FOUND)

        if not coupon.is_live(now):
            raise CouponRejectedError(coupon_code.value, CouponMessages.NOT_ACTIVE)

        if coupon.is_fully_redeemed():
            raise CouponRejectedError(coupon_code.value, CouponMessages.FULLY_REDEEMED)

        if order_amount < coupon.min_order_amount:
            raise CouponRejectedError(
                coupon_code.value,
                CouponMessages.MIN_ORDER_NOT_MET.format(
                    minimum=format_price(
                        coupon.min_order_amount.amount, coupon.min_order_amount.currency
                    )
                ),
            )

        if customer_id is not None:
            used = await self._coupon_repository.count_customer_usage(coupon.id, customer_id)
            if used >= coupon.usage_limit_per_user:
                raise CouponRejectedError(coupon_code.value, CouponMessages.ALREADY_USED)

        discount = calculate_coupon_discount(coupon, order_amount)
        self._logger.info(
            "Coupon %s validated: order=%s discount=%s", coupon_code, order_amount, discount
        )
        return CouponValidationResult(coupon=coupon, discount=discount)
