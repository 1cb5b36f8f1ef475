"""Coupon Code value object"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CouponCode:
    """Coupon code value object, always upper-case"""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Coupon code cannot be empty")

        cleaned_code = self.value.strip().upper()
        if len(cleaned_code) > 50:
            raise ValueError("Coupon code cannot exceed 50 characters")
        if " " in cleaned_code:
            raise ValueError("Coupon code cannot contain spaces")

        object.__setattr__(self, "value", cleaned_code)

    def __str__(self) -> str:
        return self.value
