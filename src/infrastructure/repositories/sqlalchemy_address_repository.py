"""
SQLAlchemy implementation of AddressRepository
"""

import logging
from typing import List, Optional

from sqlalchemy import select

from src.domain.entities.address import Address
from src.domain.repositories.address_repository import AddressRepository
from src.infrastructure.database.models import Address as SQLAddress
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session

logger = logging.getLogger(__name__)


class SQLAlchemyAddressRepository(AddressRepository):
    """SQLAlchemy implementation of address repository"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_customer(self, customer_id: str) -> List[Address]:
        """Find all saved addresses of a customer, oldest first"""
        with managed_session(self._db_manager, "find_addresses") as session:
            rows = session.scalars(
                select(SQLAddress)
                .where(SQLAddress.customer_id == customer_id)
                .order_by(SQLAddress.created_at, SQLAddress.id)
            ).all()
            return [
                Address(
                    id=row.id,
                    latitude=row.latitude,
                    longitude=row.longitude,
                    is_default=row.is_default,
                )
                for row in rows
            ]
