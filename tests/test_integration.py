"""
End-to-end pricing flow through the dependency container
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from builders import NOW, inr, make_line
from src.application.dtos.pricing_dtos import CheckoutPricingRequest
from src.domain.services.delivery_fee_calculator import DistanceFeeStrategy, FlatFeeStrategy
from src.infrastructure.configuration.config import Settings
from src.infrastructure.container.dependency_injection import DependencyContainer
from src.infrastructure.database.models import Address, Coupon, Product, Vendor
from src.infrastructure.repositories.session_handler import managed_session


@pytest.fixture
def catalog(db_manager):
    """Two vendors, one customer address and a coupon catalog"""
    with managed_session(db_manager) as session:
        session.add_all([
            Vendor(id="v1", name="Fresh Mart", base_delivery_fee=Decimal("20")),
            Vendor(id="v2", name="Daily Dairy", base_delivery_fee=Decimal("25")),
            Address(id="a1", customer_id="cust-1", is_default=True),
            Coupon(
                id="c1", code="PCT20", discount_type="percentage", discount_value=Decimal("20"),
                max_discount_amount=Decimal("100"), min_order_amount=Decimal("0"),
                start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1),
            ),
            Coupon(
                id="c2", code="FLAT100", discount_type="flat", discount_value=Decimal("100"),
                min_order_amount=Decimal("500"),
                start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1),
            ),
            Coupon(
                id="c3", code="FREESHIP", discount_type="free_shipping", discount_value=Decimal("0"),
                min_order_amount=Decimal("0"),
                start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1),
            ),
        ])
        session.flush()
        session.add_all([
            Product(id="p1", name="Apples", vendor_id="v1", price=Decimal("200")),
            Product(id="p2", name="Milk", vendor_id="v2", price=Decimal("250")),
        ])
    return db_manager


@pytest.fixture
def container(catalog, test_settings):
    return DependencyContainer(config=test_settings, db_manager=catalog)


class TestPricingFlow:
    """Test the cart to grand total flow"""

    @pytest.mark.asyncio
    async def test_full_flow(self, container):
        """Test cart, coupons, discount and delivery together"""
        cart_store = container.get_cart_store()
        discount_store = container.get_discount_store()
        coupons = container.get_coupon_application_use_case()
        pricing = container.get_checkout_pricing_use_case()

        cart_store.add_to_cart(make_line("p1", 200, vendor_id="v1", name="Apples"))
        cart_store.add_to_cart(make_line("p2", 250, vendor_id="v2", name="Milk"))

        listing = await coupons.list_coupons(cart_store.state, customer_id="cust-1", now=NOW)
        assert [e.coupon.code.value for e in listing.evaluation.eligible] == ["PCT20", "FREESHIP"]
        assert listing.evaluation.ineligible[0].eligibility.reason == "Add ₹50 more to cart"

        applied = await coupons.apply_coupon("pct20", cart_store.state, customer_id="cust-1", now=NOW)
        assert applied.success
        assert applied.discount_amount == inr(90)

        response = await pricing.execute(
            CheckoutPricingRequest(
                customer_id="cust-1", cart=cart_store.state, discount=discount_store.state
            )
        )
        assert response.pricing.delivery.total_delivery_fee == inr(45)
        assert response.pricing.grand_total == inr(405)

        # Crossing the free delivery minimum recomputes both fee and discount
        cart_store.update_quantity("p1", 1)
        assert discount_store.state.discount_amount == inr(100)

        response = await pricing.execute(
            CheckoutPricingRequest(
                customer_id="cust-1", cart=cart_store.state, discount=discount_store.state
            )
        )
        assert response.pricing.delivery.free_delivery_reason.value == "minimum_order"
        assert response.pricing.grand_total == inr(550)

    @pytest.mark.asyncio
    async def test_price_sync(self, container):
        """Test stale cart prices are refreshed from the catalog"""
        cart_store = container.get_cart_store()
        cart_store.add_to_cart(make_line("p1", 180, vendor_id="v1"))

        response = await container.get_cart_price_sync_use_case().execute()

        assert response.updated_products == ["p1"]
        assert cart_store.state.total_price == inr(200)


class TestContainerWiring:
    """Test configuration driven wiring"""

    def test_flat_strategy_by_default(self, container):
        """Test the default fee strategy"""
        assert isinstance(container.get_fee_strategy(), FlatFeeStrategy)

    def test_distance_strategy_from_settings(self, db_manager):
        """Test the fee strategy follows configuration"""
        settings = Settings(_env_file=None, database_url="sqlite:///:memory:", fee_strategy="distance")
        container = DependencyContainer(config=settings, db_manager=db_manager)
        assert isinstance(container.get_delivery_fee_calculator().strategy, DistanceFeeStrategy)
