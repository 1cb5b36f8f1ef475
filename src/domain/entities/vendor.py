"""
Vendor entity

Only the subset of vendor data needed to price delivery.
"""

from dataclasses import dataclass
from typing import Optional

from src.domain.value_objects.money import Money


@dataclass(frozen=True)
class Vendor:
    """Vendor delivery-fee configuration"""

    id: str
    base_delivery_fee: Money
    per_km_rate: Optional[Money] = None
    free_delivery_threshold: Optional[Money] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Vendor id cannot be empty")

    @property
    def has_coordinates(self) -> bool:
        """Check if the vendor location is known"""
        return self.latitude is not None and self.longitude is not None
