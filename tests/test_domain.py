"""
Domain Layer Tests - Value Objects and Entities
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from builders import NOW, inr, make_coupon, make_line
from src.domain.entities.address import Address, pick_default_address
from src.domain.entities.cart_line import CartLine
from src.domain.entities.coupon import ApplicableTo, DiscountType
from src.domain.entities.vendor import Vendor
from src.domain.value_objects.coupon_code import CouponCode
from src.domain.value_objects.money import Money


class TestMoney:
    """Test the Money value object"""

    def test_rounds_to_two_places(self):
        """Test amounts are rounded half up to paise"""
        assert Money.of("10.005").amount == Decimal("10.01")
        assert Money.of(10).amount == Decimal("10.00")

    def test_negative_amount_rejected(self):
        """Test negative amounts are invalid"""
        with pytest.raises(ValueError):
            Money.of(-1)

    def test_invalid_currency_rejected(self):
        """Test currency must be a 3-letter code"""
        with pytest.raises(ValueError):
            Money.of(1, "RUPEE")

    def test_arithmetic(self):
        """Test add, subtract and multiply"""
        assert inr(20) + inr(25) == inr(45)
        assert inr(45) - inr(20) == inr(25)
        assert inr("12.50") * 3 == inr("37.50")
        assert 2 * inr(10) == inr(20)

    def test_subtract_below_zero_rejected(self):
        """Test money never goes negative through subtraction"""
        with pytest.raises(ValueError):
            inr(10) - inr(20)

    def test_mixed_currency_rejected(self):
        """Test arithmetic across currencies is an error"""
        with pytest.raises(ValueError):
            inr(10) + Money.of(10, "USD")
        with pytest.raises(ValueError):
            inr(10) < Money.of(10, "USD")

    def test_percentage(self):
        """Test percentage of an amount"""
        assert inr(250).percentage(20) == inr(50)
        assert inr(333).percentage(Decimal("12.5")) == inr("41.63")

    def test_shortfall_to(self):
        """Test distance to a target amount"""
        assert inr(450).shortfall_to(inr(499)) == inr(49)
        assert inr(600).shortfall_to(inr(499)).is_zero()

    def test_display(self):
        """Test display formatting"""
        assert str(inr(450)) == "₹450.00"
        assert Money.of(5, "USD").format_display() == "5.00 USD"


class TestCouponCode:
    """Test the CouponCode value object"""

    def test_normalized_to_upper_case(self):
        """Test codes are stripped and upper-cased"""
        assert CouponCode("  save20 ").value == "SAVE20"
        assert CouponCode("save20") == CouponCode("SAVE20")

    def test_invalid_codes(self):
        """Test invalid coupon codes"""
        for value in ["", "   ", "HAS SPACE", "X" * 51, None]:
            with pytest.raises(ValueError):
                CouponCode(value)


class TestCartLine:
    """Test the CartLine entity"""

    def test_effective_price_prefers_discount_price(self):
        """Test the discount price wins when present"""
        line = make_line(price=100, quantity=2, discount_price=inr(80))
        assert line.effective_price == inr(80)
        assert line.line_total == inr(160)

    def test_quantity_must_be_positive(self):
        """Test zero-quantity lines cannot exist"""
        with pytest.raises(ValueError):
            make_line(quantity=0)

    def test_requires_vendor(self):
        """Test every line belongs to a vendor"""
        with pytest.raises(ValueError):
            make_line(vendor_id="")

    def test_dict_round_trip_keeps_prices(self):
        """Test serialization keeps exact amounts"""
        line = make_line(price="12.50", quantity=3, discount_price=inr("9.99"), category_id="dairy")
        restored = CartLine.from_dict(line.to_dict())
        assert restored == line


class TestCoupon:
    """Test the Coupon entity"""

    def test_code_coerced(self):
        """Test plain string codes become CouponCode"""
        coupon = make_coupon("pct20", value=20)
        assert coupon.code == CouponCode("PCT20")

    def test_usage_count_cannot_exceed_limit(self):
        """Test usage count invariant"""
        with pytest.raises(ValueError):
            make_coupon(usage_limit=5, usage_count=6)

    def test_end_before_start_rejected(self):
        """Test date window invariant"""
        with pytest.raises(ValueError):
            make_coupon(start_date=NOW, end_date=NOW - timedelta(days=1))

    def test_percentage_over_100_rejected(self):
        """Test percentage upper bound"""
        with pytest.raises(ValueError):
            make_coupon(value=120)

    def test_scoped_coupon_requires_id(self):
        """Test scope target is mandatory for scoped coupons"""
        with pytest.raises(ValueError):
            make_coupon(applicable_to=ApplicableTo.CATEGORY)

    def test_liveness(self):
        """Test active flag and date window"""
        coupon = make_coupon()
        assert coupon.is_live(NOW)
        assert not coupon.is_live(NOW + timedelta(days=31))
        assert not make_coupon(is_active=False).is_live(NOW)

    def test_redemption_limits(self):
        """Test global usage limit bookkeeping"""
        coupon = make_coupon(usage_limit=3, usage_count=3)
        assert coupon.is_fully_redeemed()
        assert coupon.remaining_uses == 0
        assert make_coupon().remaining_uses is None

    def test_free_shipping_type(self):
        """Test free shipping coupons are accepted with a zero value"""
        coupon = make_coupon("SHIPFREE", DiscountType.FREE_SHIPPING, 0)
        assert coupon.discount_value == Decimal("0")


class TestAddressAndVendor:
    """Test address selection and vendor coordinates"""

    def test_default_address_preferred(self):
        """Test the default address is picked over earlier ones"""
        first = Address(id="a1")
        default = Address(id="a2", is_default=True)
        assert pick_default_address([first, default]) == default

    def test_first_address_when_no_default(self):
        """Test fallback to the first saved address"""
        first = Address(id="a1")
        assert pick_default_address([first, Address(id="a2")]) == first
        assert pick_default_address([]) is None

    def test_partial_coordinates(self):
        """Test a single coordinate is not a location"""
        assert not Address(id="a1", latitude=12.9).has_coordinates
        assert not Vendor(id="v1", base_delivery_fee=inr(20), longitude=77.5).has_coordinates
