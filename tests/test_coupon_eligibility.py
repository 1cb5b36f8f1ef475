"""
Coupon Eligibility and Discount Engine Tests
"""

from datetime import timedelta

import pytest

from builders import NOW, inr, make_coupon, make_line
from src.domain.entities.coupon import ApplicableTo, DiscountType
from src.domain.services.coupon_eligibility import (
    check_coupon_eligibility,
    coupon_suggestions,
    describe_coupon,
    evaluate_coupons,
    find_conflicting_items,
)
from src.domain.services.discount_calculator import (
    calculate_coupon_discount,
    flat_discount,
    percentage_discount,
)


class TestDiscountFormulas:
    """Test the discount formulas"""

    def test_percentage_capped(self):
        """Test percentage discounts respect the maximum"""
        assert percentage_discount(inr(1000), 20, inr(100)) == inr(100)
        assert percentage_discount(inr(250), 20, inr(100)) == inr(50)
        assert percentage_discount(inr(1000), 20) == inr(200)

    def test_flat_never_exceeds_subtotal(self):
        """Test flat discounts are clamped to the subtotal"""
        assert flat_discount(inr(60), 100) == inr(60)
        assert flat_discount(inr(600), 100) == inr(100)

    def test_free_shipping_has_no_item_discount(self):
        """Test free shipping only affects delivery"""
        coupon = make_coupon("SHIP", DiscountType.FREE_SHIPPING, 0)
        assert calculate_coupon_discount(coupon, inr(500)).is_zero()

    @pytest.mark.parametrize("subtotal", [0, 1, 99.99, 250, 499, 500, 1000, 12345.67])
    @pytest.mark.parametrize("percent", [5, 20, 50, 100])
    def test_percentage_never_exceeds_cap(self, subtotal, percent):
        """Test capped percentage discounts stay within the cap and the subtotal"""
        discount = percentage_discount(inr(subtotal), percent, inr(100))
        assert discount <= inr(100)
        assert discount <= inr(subtotal)

    @pytest.mark.parametrize("subtotal", [0, 1, 99.99, 250, 499, 500, 1000, 12345.67])
    @pytest.mark.parametrize("value", [1, 50, 100, 1000])
    def test_flat_never_exceeds_subtotal_sweep(self, subtotal, value):
        """Test flat discounts never exceed the subtotal"""
        discount = flat_discount(inr(subtotal), value)
        assert discount <= inr(subtotal)
        assert discount <= inr(value)

    @pytest.mark.parametrize("subtotal", [0, 1, 150, 499.99])
    def test_below_minimum_never_eligible(self, subtotal):
        """Test coupons whose minimum exceeds the subtotal are always ineligible"""
        coupons = [
            make_coupon("PCT20", value=20, min_order=500),
            make_coupon("FLAT100", DiscountType.FLAT, 100, min_order=500),
            make_coupon("SHIP", DiscountType.FREE_SHIPPING, 0, min_order=500),
        ]
        lines = [make_line(price=subtotal)] if subtotal else []

        evaluation = evaluate_coupons(coupons, lines, inr(subtotal), NOW)

        assert evaluation.eligible == ()
        assert len(evaluation.ineligible) == 3


class TestCheckCouponEligibility:
    """Test single coupon eligibility checks"""

    def test_minimum_order_shortfall(self):
        """Test the shortfall message for a coupon just out of reach"""
        coupon = make_coupon("FLAT100", DiscountType.FLAT, 100, min_order=500)
        result = check_coupon_eligibility(coupon, [make_line(price=450)], inr(450))

        assert not result.is_eligible
        assert result.shortfall == inr(50)
        assert result.reason == "Add ₹50 more to cart"

    def test_fully_redeemed_checked_first(self):
        """Test global usage limit is reported before the minimum order"""
        coupon = make_coupon(min_order=500, usage_limit=10, usage_count=10)
        result = check_coupon_eligibility(coupon, [make_line(price=100)], inr(100))

        assert result.reason == "Coupon fully redeemed"
        assert result.shortfall is None

    def test_per_customer_limit(self):
        """Test a customer cannot exceed their own usage limit"""
        coupon = make_coupon(usage_limit_per_user=2)
        lines = [make_line(price=100)]

        assert check_coupon_eligibility(coupon, lines, inr(100), customer_usage_count=1).is_eligible
        result = check_coupon_eligibility(coupon, lines, inr(100), customer_usage_count=2)
        assert result.reason == "You have already used this coupon"

    def test_scope_miss_lists_conflicting_items(self, scoped_coupon):
        """Test lines outside the scope are reported as conflicting"""
        lines = [make_line("p1", 100, vendor_id="v1"), make_line("p2", 80, vendor_id="v3")]
        result = check_coupon_eligibility(scoped_coupon, lines, inr(180))

        assert not result.is_eligible
        assert result.reason == "No items from this store in cart"
        assert [line.product_id for line in result.conflicting_items] == ["p1", "p2"]

    def test_scope_match_is_eligible(self, scoped_coupon):
        """Test one matching line is enough for a scoped coupon"""
        lines = [make_line("p1", 100, vendor_id="v1"), make_line("p2", 80, vendor_id="v2")]
        result = check_coupon_eligibility(scoped_coupon, lines, inr(180))

        assert result.is_eligible
        assert result.conflicting_items == ()

    @pytest.mark.parametrize(
        "applicable_to, applicable_id, reason",
        [
            (ApplicableTo.CATEGORY, "dairy", "No items from this category in cart"),
            (ApplicableTo.PRODUCT, "p9", "Required product not in cart"),
        ],
    )
    def test_category_and_product_scopes(self, applicable_to, applicable_id, reason):
        """Test category and product scoped coupons"""
        coupon = make_coupon(applicable_to=applicable_to, applicable_id=applicable_id)
        lines = [make_line("p1", 100, category_id="bakery")]

        assert check_coupon_eligibility(coupon, lines, inr(100)).reason == reason

        matching = [make_line("p9", 100, category_id="dairy")]
        assert check_coupon_eligibility(coupon, matching, inr(100)).is_eligible

    def test_conflicts_empty_for_unscoped(self):
        """Test unscoped coupons never conflict"""
        assert find_conflicting_items(make_coupon(), [make_line()]) == []


class TestEvaluateCoupons:
    """Test catalog partitioning and ordering"""

    def test_partition_and_discounts(self):
        """Test eligible coupons carry their discount"""
        pct = make_coupon("PCT20", DiscountType.PERCENTAGE, 20, max_discount=100)
        flat = make_coupon("FLAT100", DiscountType.FLAT, 100, min_order=500)
        evaluation = evaluate_coupons([flat, pct], [make_line(price=250)], inr(250), NOW)

        assert [e.coupon.code.value for e in evaluation.eligible] == ["PCT20"]
        assert evaluation.eligible[0].discount == inr(50)
        assert [e.coupon.code.value for e in evaluation.ineligible] == ["FLAT100"]
        assert evaluation.best.coupon is pct

    def test_eligible_sorted_by_discount(self):
        """Test the best offer is listed first"""
        coupons = [
            make_coupon("TEN", value=10),
            make_coupon("FLAT80", DiscountType.FLAT, 80),
            make_coupon("THIRTY", value=30),
        ]
        evaluation = evaluate_coupons(coupons, [make_line(price=400)], inr(400), NOW)

        assert [e.coupon.code.value for e in evaluation.eligible] == ["THIRTY", "FLAT80", "TEN"]

    def test_ineligible_sorted_by_shortfall(self, scoped_coupon):
        """Test closest-to-qualifying coupons come first, other reasons last"""
        coupons = [
            scoped_coupon,
            make_coupon("FAR", min_order=1000),
            make_coupon("NEAR", min_order=300),
            make_coupon("USEDUP", usage_limit=1, usage_count=1),
        ]
        evaluation = evaluate_coupons(coupons, [make_line(price=250)], inr(250), NOW)

        assert [e.coupon.code.value for e in evaluation.ineligible] == [
            "NEAR",
            "FAR",
            "V2ONLY",
            "USEDUP",
        ]

    def test_ties_keep_catalog_order(self):
        """Test equal discounts keep their original order"""
        coupons = [make_coupon("A", value=10), make_coupon("B", value=10), make_coupon("C", value=10)]
        evaluation = evaluate_coupons(coupons, [make_line(price=100)], inr(100), NOW)

        assert [e.coupon.code.value for e in evaluation.eligible] == ["A", "B", "C"]

    def test_inactive_and_expired_dropped(self):
        """Test coupons that are not live appear in neither list"""
        coupons = [
            make_coupon("OFF", is_active=False),
            make_coupon("OLD", start_date=NOW - timedelta(days=10), end_date=NOW - timedelta(days=1)),
            make_coupon("SOON", start_date=NOW + timedelta(days=1), end_date=NOW + timedelta(days=5)),
        ]
        evaluation = evaluate_coupons(coupons, [make_line()], inr(100), NOW)

        assert evaluation.eligible == ()
        assert evaluation.ineligible == ()

    def test_customer_usage_applied(self):
        """Test per-customer usage from a lookup"""
        coupon = make_coupon("ONCE")
        evaluation = evaluate_coupons(
            [coupon], [make_line()], inr(100), NOW, customer_usage={coupon.id: 1}
        )
        assert evaluation.find("once").eligibility.reason == "You have already used this coupon"

    def test_empty_cart_has_shortfalls(self):
        """Test an empty cart is evaluated normally"""
        evaluation = evaluate_coupons([make_coupon(min_order=100)], [], inr(0), NOW)
        assert evaluation.ineligible[0].eligibility.shortfall == inr(100)


class TestCouponPresentation:
    """Test labels and suggestions"""

    def test_labels(self):
        """Test coupon labels"""
        assert describe_coupon(make_coupon("P", value=20)) == "20% OFF"
        assert describe_coupon(make_coupon("F", DiscountType.FLAT, 100)) == "₹100 OFF"
        assert describe_coupon(make_coupon("S", DiscountType.FREE_SHIPPING, 0)) == "FREE DELIVERY"
        assert (
            describe_coupon(make_coupon("B", value=20, includes_free_delivery=True))
            == "FREE DELIVERY + 20% OFF"
        )

    def test_suggestions(self, scoped_coupon):
        """Test suggestions for ineligible coupons"""
        evaluation = evaluate_coupons(
            [make_coupon("NEAR", min_order=300), scoped_coupon],
            [make_line("p1", 250, name="Milk")],
            inr(250),
            NOW,
        )

        near, scoped = evaluation.ineligible
        assert coupon_suggestions(near) == ["Add ₹50 worth of items to your cart"]
        assert coupon_suggestions(scoped) == [
            "Remove: Milk",
            "Add items from the required store",
        ]
