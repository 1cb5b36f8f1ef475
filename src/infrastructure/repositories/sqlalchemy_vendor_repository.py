"""
SQLAlchemy implementation of VendorRepository
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import select

from src.domain.entities.vendor import Vendor
from src.domain.repositories.vendor_repository import VendorRepository
from src.domain.value_objects.money import Money
from src.infrastructure.database.models import Vendor as SQLVendor
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session

logger = logging.getLogger(__name__)


class SQLAlchemyVendorRepository(VendorRepository):
    """SQLAlchemy implementation of vendor repository"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_ids(self, vendor_ids: Iterable[str]) -> List[Vendor]:
        """Find vendors by id; unknown ids are omitted"""
        vendor_ids = list(vendor_ids)
        if not vendor_ids:
            return []

        with managed_session(self._db_manager, "find_vendors") as session:
            rows = session.scalars(
                select(SQLVendor).where(SQLVendor.id.in_(vendor_ids))
            ).all()
            return [self._to_entity(row) for row in rows]

    @staticmethod
    def _to_entity(row: SQLVendor) -> Vendor:
        def money(value):
            return Money(value, row.currency) if value is not None else None

        return Vendor(
            id=row.id,
            base_delivery_fee=Money(row.base_delivery_fee, row.currency),
            per_km_rate=money(row.per_km_rate),
            free_delivery_threshold=money(row.free_delivery_threshold),
            latitude=row.latitude,
            longitude=row.longitude,
        )
