"""
Address repository interface
"""

from abc import ABC, abstractmethod
from typing import List

from src.domain.entities.address import Address


class AddressRepository(ABC):
    """Repository interface for saved customer addresses"""

    @abstractmethod
    async def find_by_customer(self, customer_id: str) -> List[Address]:
        """Find all saved addresses of a customer"""
