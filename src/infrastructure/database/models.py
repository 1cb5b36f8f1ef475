# pylint: disable=too-few-public-methods
"""
SQLAlchemy database models for the pricing engine

Read models for the coupon catalog, vendor delivery settings, customer
addresses and product prices.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Type

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeMeta, Mapped, declarative_base, mapped_column, relationship
from sqlalchemy.sql import func

from src.infrastructure.utilities.constants import BusinessSettings

# Create declarative base with proper type annotation
_Base = declarative_base()

# Type alias for mypy
Base: Type[DeclarativeMeta] = _Base

MONEY = Numeric(12, 2, asdecimal=True)


class Coupon(Base):
    """Coupon catalog entry"""
    __tablename__ = "coupons"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    discount_type: Mapped[str] = mapped_column(String(20), nullable=False)
    discount_value: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    min_order_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    max_discount_amount: Mapped[Optional[Decimal]] = mapped_column(MONEY, nullable=True)
    applicable_to: Mapped[str] = mapped_column(String(20), nullable=False, default="all")
    applicable_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    usage_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    usage_limit_per_user: Mapped[int] = mapped_column(
        Integer, nullable=False, default=BusinessSettings.DEFAULT_USAGE_LIMIT_PER_USER
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    includes_free_delivery: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    usages: Mapped[List["CouponUsage"]] = relationship("CouponUsage", back_populates="coupon")


class CouponUsage(Base):
    """One redemption of a coupon by a customer"""
    __tablename__ = "coupon_usage"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coupon_id: Mapped[str] = mapped_column(ForeignKey("coupons.id"), index=True, nullable=False)
    customer_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    order_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    used_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    coupon: Mapped["Coupon"] = relationship("Coupon", back_populates="usages")


class Vendor(Base):
    """Vendor delivery settings"""
    __tablename__ = "vendors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    base_delivery_fee: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    per_km_rate: Mapped[Optional[Decimal]] = mapped_column(MONEY, nullable=True)
    free_delivery_threshold: Mapped[Optional[Decimal]] = mapped_column(MONEY, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    products: Mapped[List["Product"]] = relationship("Product", back_populates="vendor")


class Address(Base):
    """Saved customer delivery address"""
    __tablename__ = "addresses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Product(Base):
    """Product catalog price"""
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    vendor_id: Mapped[str] = mapped_column(ForeignKey("vendors.id"), index=True, nullable=False)
    category_id: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    discount_price: Mapped[Optional[Decimal]] = mapped_column(MONEY, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    vendor: Mapped["Vendor"] = relationship("Vendor", back_populates="products")
