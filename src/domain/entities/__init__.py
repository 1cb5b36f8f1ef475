"""
Domain entities package

Contains the core business entities of the pricing engine.
"""

from .address import Address, pick_default_address
from .cart_line import CartLine
from .coupon import ApplicableTo, Coupon, DiscountType
from .vendor import Vendor

__all__ = [
    "Address",
    "ApplicableTo",
    "CartLine",
    "Coupon",
    "DiscountType",
    "Vendor",
    "pick_default_address",
]
