"""
Product repository interface

Defines the contract for looking up current catalog prices.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from src.domain.value_objects.money import Money


@dataclass(frozen=True)
class ProductPrice:
    """Current catalog price of a product"""

    product_id: str
    unit_price: Money
    discount_price: Optional[Money] = None
    is_active: bool = True


class ProductRepository(ABC):
    """Repository interface for product price lookups"""

    @abstractmethod
    async def find_prices(self, product_ids: Iterable[str]) -> Dict[str, ProductPrice]:
        """Find current prices keyed by product id; unknown ids are omitted"""
