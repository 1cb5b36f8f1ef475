"""
SQLAlchemy implementation of ProductRepository
"""

import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import select

from src.domain.repositories.product_repository import ProductPrice, ProductRepository
from src.domain.value_objects.money import Money
from src.infrastructure.database.models import Product as SQLProduct
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository(ProductRepository):
    """SQLAlchemy implementation of product repository"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_prices(self, product_ids: Iterable[str]) -> Dict[str, ProductPrice]:
        """Find current prices keyed by product id; unknown ids are omitted"""
        product_ids = list(product_ids)
        if not product_ids:
            return {}

        with managed_session(self._db_manager, "find_product_prices") as session:
            rows = session.scalars(
                select(SQLProduct).where(SQLProduct.id.in_(product_ids))
            ).all()
            return {
                row.id: ProductPrice(
                    product_id=row.id,
                    unit_price=Money(row.price, row.currency),
                    discount_price=(
                        Money(row.discount_price, row.currency)
                        if row.discount_price is not None
                        else None
                    ),
                    is_active=row.is_active,
                )
                for row in rows
            }
