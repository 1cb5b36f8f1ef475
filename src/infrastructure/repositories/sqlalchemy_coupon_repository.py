"""
SQLAlchemy implementation of CouponRepository
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select

from src.domain.entities.coupon import ApplicableTo, Coupon, DiscountType
from src.domain.repositories.coupon_repository import CouponRepository
from src.domain.value_objects.coupon_code import CouponCode
from src.domain.value_objects.money import Money
from src.infrastructure.database.models import Coupon as SQLCoupon
from src.infrastructure.database.models import CouponUsage as SQLCouponUsage
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session
from src.infrastructure.utilities.helpers import ensure_aware

logger = logging.getLogger(__name__)


class SQLAlchemyCouponRepository(CouponRepository):
    """SQLAlchemy implementation of coupon repository"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_active(self, now: datetime) -> List[Coupon]:
        """Find coupons flagged active whose date window contains ``now``"""
        with managed_session(self._db_manager, "find_active_coupons") as session:
            rows = session.scalars(
                select(SQLCoupon)
                .where(SQLCoupon.is_active.is_(True))
                .order_by(SQLCoupon.created_at, SQLCoupon.id)
            ).all()
            coupons = [self._to_entity(row) for row in rows]

        # Window filtering happens on aware datetimes since sqlite drops tzinfo
        live = [coupon for coupon in coupons if coupon.is_within_window(now)]
        self._logger.debug("Active coupons: %d of %d in window", len(live), len(coupons))
        return live

    async def find_by_code(self, code: CouponCode) -> Optional[Coupon]:
        """Find a coupon by its code regardless of state"""
        with managed_session(self._db_manager, "find_coupon_by_code") as session:
            row = session.scalars(
                select(SQLCoupon).where(SQLCoupon.code == code.value)
            ).first()
            return self._to_entity(row) if row else None

    async def count_customer_usage(self, coupon_id: str, customer_id: str) -> int:
        """Count how many times a customer has redeemed a coupon"""
        with managed_session(self._db_manager, "count_coupon_usage") as session:
            return session.scalar(
                select(func.count(SQLCouponUsage.id)).where(
                    SQLCouponUsage.coupon_id == coupon_id,
                    SQLCouponUsage.customer_id == customer_id,
                )
            ) or 0

    @staticmethod
    def _to_entity(row: SQLCoupon) -> Coupon:
        currency = row.currency
        return Coupon(
            id=row.id,
            code=CouponCode(row.code),
            discount_type=DiscountType(row.discount_type),
            discount_value=row.discount_value,
            min_order_amount=Money(row.min_order_amount or 0, currency),
            max_discount_amount=(
                Money(row.max_discount_amount, currency)
                if row.max_discount_amount is not None
                else None
            ),
            applicable_to=ApplicableTo(row.applicable_to),
            applicable_id=row.applicable_id,
            usage_limit=row.usage_limit,
            usage_count=row.usage_count,
            usage_limit_per_user=row.usage_limit_per_user,
            start_date=ensure_aware(row.start_date),
            end_date=ensure_aware(row.end_date),
            includes_free_delivery=row.includes_free_delivery,
            is_active=row.is_active,
        )
