"""
Address entity

Customer delivery address, reduced to what delivery pricing needs.
"""

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class Address:
    """Saved customer address"""

    id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_default: bool = False

    @property
    def has_coordinates(self) -> bool:
        """Check if both coordinates are present"""
        return self.latitude is not None and self.longitude is not None


def pick_default_address(addresses: Sequence[Address]) -> Optional[Address]:
    """Return the default address, else the first one, else None"""
    for address in addresses:
        if address.is_default:
            return address
    return addresses[0] if addresses else None
