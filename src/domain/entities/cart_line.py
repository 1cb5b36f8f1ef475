"""
Cart line entity

One product in the customer's cart together with the pricing data the
pricing engine needs.
"""

from dataclasses import dataclass, replace
from typing import Optional

from src.domain.value_objects.money import Money


@dataclass(frozen=True)
class CartLine:
    """A single product line in the cart"""

    product_id: str
    name: str
    unit_price: Money
    vendor_id: str
    quantity: int = 1
    discount_price: Optional[Money] = None
    image_ref: Optional[str] = None
    category_id: Optional[str] = None

    def __post_init__(self):
        """Validate the line after initialization"""
        if not self.product_id:
            raise ValueError("Cart line requires a product id")

        if not self.vendor_id:
            raise ValueError("Cart line requires a vendor id")

        if not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("Cart line quantity must be at least 1")

        if (
            self.discount_price is not None
            and self.discount_price.currency != self.unit_price.currency
        ):
            raise ValueError("Discount price currency must match unit price currency")

    @property
    def effective_price(self) -> Money:
        """Price actually charged per unit"""
        if self.discount_price is not None:
            return self.discount_price
        return self.unit_price

    @property
    def line_total(self) -> Money:
        """Effective price times quantity"""
        return self.effective_price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLine":
        """Return a copy of this line with a new quantity"""
        return replace(self, quantity=quantity)

    def with_prices(self, unit_price: Money, discount_price: Optional[Money]) -> "CartLine":
        """Return a copy of this line with refreshed prices"""
        return replace(self, unit_price=unit_price, discount_price=discount_price)

    def to_dict(self) -> dict:
        """Convert to dictionary representation"""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price.amount),
            "discount_price": (
                str(self.discount_price.amount) if self.discount_price is not None else None
            ),
            "currency": self.unit_price.currency,
            "quantity": self.quantity,
            "vendor_id": self.vendor_id,
            "image_ref": self.image_ref,
            "category_id": self.category_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """Create a line from its dictionary representation"""
        currency = data.get("currency") or "INR"
        discount_price = data.get("discount_price")
        return cls(
            product_id=str(data["product_id"]),
            name=data.get("name", ""),
            unit_price=Money.of(data["unit_price"], currency),
            discount_price=(
                Money.of(discount_price, currency) if discount_price is not None else None
            ),
            quantity=int(data.get("quantity", 1)),
            vendor_id=str(data["vendor_id"]),
            image_ref=data.get("image_ref"),
            category_id=data.get("category_id"),
        )
