"""
Vendor repository interface
"""

from abc import ABC, abstractmethod
from typing import Iterable, List

from src.domain.entities.vendor import Vendor


class VendorRepository(ABC):
    """Repository interface for vendor delivery configuration"""

    @abstractmethod
    async def find_by_ids(self, vendor_ids: Iterable[str]) -> List[Vendor]:
        """Find vendors by id; unknown ids are omitted"""
