"""
Builders for domain objects used across the test suite
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from src.domain.entities.cart_line import CartLine
from src.domain.entities.coupon import Coupon, DiscountType
from src.domain.entities.vendor import Vendor
from src.domain.value_objects.money import Money

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def inr(amount) -> Money:
    """Shorthand for rupee amounts"""
    return Money.of(amount, "INR")


def make_line(product_id="p1", price=100, vendor_id="v1", quantity=1, **kwargs) -> CartLine:
    """Build a cart line"""
    return CartLine(
        product_id=product_id,
        name=kwargs.pop("name", f"Product {product_id}"),
        unit_price=inr(price),
        vendor_id=vendor_id,
        quantity=quantity,
        **kwargs,
    )


def make_coupon(code="SAVE10", discount_type=DiscountType.PERCENTAGE, value=10, **kwargs) -> Coupon:
    """Build a coupon live at ``NOW``"""
    defaults = {
        "id": kwargs.pop("id", f"c-{code.lower()}"),
        "min_order_amount": inr(kwargs.pop("min_order", 0)),
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=30),
    }
    max_discount = kwargs.pop("max_discount", None)
    if max_discount is not None:
        defaults["max_discount_amount"] = inr(max_discount)
    defaults.update(kwargs)
    return Coupon(code=code, discount_type=discount_type, discount_value=Decimal(str(value)), **defaults)


def make_vendor(vendor_id="v1", fee=20, **kwargs) -> Vendor:
    """Build a vendor with a flat base fee"""
    return Vendor(id=vendor_id, base_delivery_fee=inr(fee), **kwargs)
