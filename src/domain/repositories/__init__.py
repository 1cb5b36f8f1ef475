"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .address_repository import AddressRepository
from .coupon_repository import CouponRepository
from .product_repository import ProductPrice, ProductRepository
from .vendor_repository import VendorRepository

__all__ = [
    "AddressRepository",
    "CouponRepository",
    "ProductPrice",
    "ProductRepository",
    "VendorRepository",
]
