"""
SQLAlchemy repository implementations
"""

from .sqlalchemy_address_repository import SQLAlchemyAddressRepository
from .sqlalchemy_coupon_repository import SQLAlchemyCouponRepository
from .sqlalchemy_product_repository import SQLAlchemyProductRepository
from .sqlalchemy_vendor_repository import SQLAlchemyVendorRepository

__all__ = [
    "SQLAlchemyAddressRepository",
    "SQLAlchemyCouponRepository",
    "SQLAlchemyProductRepository",
    "SQLAlchemyVendorRepository",
]
