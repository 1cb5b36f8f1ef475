"""
Database Infrastructure

Contains SQLAlchemy models and engine/session management.
"""

from .models import Address as AddressModel
from .models import Base
from .models import Coupon as CouponModel
from .models import CouponUsage as CouponUsageModel
from .models import Product as ProductModel
from .models import Vendor as VendorModel
from .operations import DatabaseManager, get_db_manager

__all__ = [
    "AddressModel",
    "Base",
    "CouponModel",
    "CouponUsageModel",
    "DatabaseManager",
    "ProductModel",
    "VendorModel",
    "get_db_manager",
]
