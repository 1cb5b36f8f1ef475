"""
Dependency Injection Container

Manages the instantiation and lifecycle of dependencies for Clean Architecture.
"""

import logging
from typing import Any, Dict, Optional

from ...application.state.cart_store import CartStore
from ...application.state.discount_store import DiscountStore
from ...application.use_cases.cart_price_sync_use_case import CartPriceSyncUseCase
from ...application.use_cases.checkout_pricing_use_case import CheckoutPricingUseCase
from ...application.use_cases.coupon_application_use_case import CouponApplicationUseCase
from ...domain.repositories.address_repository import AddressRepository
from ...domain.repositories.coupon_repository import CouponRepository
from ...domain.repositories.product_repository import ProductRepository
from ...domain.repositories.vendor_repository import VendorRepository
from ...domain.services.delivery_fee_calculator import (
    DeliveryFeeCalculator,
    DistanceFeeStrategy,
    FeeStrategy,
    FlatFeeStrategy,
)
from ...domain.value_objects.money import Money
from ...services.coupon_validation_service import CouponValidationService
from ..cache.cache_manager import CachedCouponRepository, InMemoryCache
from ..configuration.config import Settings, get_config
from ..database.operations import DatabaseManager, get_db_manager
from ..repositories.sqlalchemy_address_repository import SQLAlchemyAddressRepository
from ..repositories.sqlalchemy_coupon_repository import SQLAlchemyCouponRepository
from ..repositories.sqlalchemy_product_repository import SQLAlchemyProductRepository
from ..repositories.sqlalchemy_vendor_repository import SQLAlchemyVendorRepository

logger = logging.getLogger(__name__)

FEE_STRATEGY_TYPES = {
    "flat": FlatFeeStrategy,
    "distance": DistanceFeeStrategy,
}


class DependencyContainer:
    """
    Dependency injection container for Clean Architecture

    Manages the instantiation and lifecycle of:
    - Repositories (Infrastructure layer)
    - Pricing services
    - Session stores and use cases (Application layer)

    One container serves one shopping session: it owns the cart and discount
    stores, with the discount store bound to cart changes.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        db_manager: Optional[DatabaseManager] = None,
        repositories: Optional[Dict[str, Any]] = None,
    ):
        self._config = config or get_config()
        self._db_manager = db_manager
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self._setup_dependencies(repositories or {})

    def _setup_dependencies(self, overrides: Dict[str, Any]):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        self._register_repositories(overrides)
        self._register_services()
        self._register_stores()
        self._register_use_cases()

        self._logger.info("Dependency injection container setup complete")

    def _register_repositories(self, overrides: Dict[str, Any]):
        """Register repository implementations; ``overrides`` replaces them by name"""
        db_manager = self._db_manager or get_db_manager()

        coupon_repository = overrides.get("coupon_repository") or SQLAlchemyCouponRepository(db_manager)
        self._instances["coupon_repository"] = CachedCouponRepository(
            coupon_repository, InMemoryCache(default_ttl=self._config.coupon_cache_ttl_seconds)
        )
        self._instances["address_repository"] = (
            overrides.get("address_repository") or SQLAlchemyAddressRepository(db_manager)
        )
        self._instances["vendor_repository"] = (
            overrides.get("vendor_repository") or SQLAlchemyVendorRepository(db_manager)
        )
        self._instances["product_repository"] = (
            overrides.get("product_repository") or SQLAlchemyProductRepository(db_manager)
        )

        self._logger.debug("Repositories registered successfully")

    def _register_services(self):
        """Register pricing services"""
        currency = self._config.currency
        strategy = FEE_STRATEGY_TYPES[self._config.fee_strategy]()

        self._instances["fee_strategy"] = strategy
        self._instances["delivery_fee_calculator"] = DeliveryFeeCalculator(
            strategy=strategy,
            default_fee=Money.of(self._config.default_delivery_fee, currency),
        )
        self._instances["coupon_validation_service"] = CouponValidationService(
            self.get_coupon_repository()
        )

        self._logger.debug("Services registered: fee strategy %r", strategy)

    def _register_stores(self):
        """Register the session stores"""
        cart_store = CartStore(currency=self._config.currency)
        discount_store = DiscountStore()
        discount_store.bind(cart_store)

        self._instances["cart_store"] = cart_store
        self._instances["discount_store"] = discount_store

    def _register_use_cases(self):
        """Register use case implementations with their dependencies"""
        self._instances["checkout_pricing_use_case"] = CheckoutPricingUseCase(
            address_repository=self.get_address_repository(),
            vendor_repository=self.get_vendor_repository(),
            delivery_calculator=self.get_delivery_fee_calculator(),
            free_delivery_minimum=Money.of(
                self._config.free_delivery_minimum, self._config.currency
            ),
        )

        self._instances["coupon_application_use_case"] = CouponApplicationUseCase(
            coupon_repository=self.get_coupon_repository(),
            validation_service=self.get_coupon_validation_service(),
            discount_store=self.get_discount_store(),
            cart_store=self.get_cart_store(),
        )

        self._instances["cart_price_sync_use_case"] = CartPriceSyncUseCase(
            product_repository=self.get_product_repository(),
            cart_store=self.get_cart_store(),
        )

        self._logger.debug("Use cases registered successfully")

    # Repository getters
    def get_coupon_repository(self) -> CouponRepository:
        """Get coupon repository instance"""
        return self._instances["coupon_repository"]

    def get_address_repository(self) -> AddressRepository:
        """Get address repository instance"""
        return self._instances["address_repository"]

    def get_vendor_repository(self) -> VendorRepository:
        """Get vendor repository instance"""
        return self._instances["vendor_repository"]

    def get_product_repository(self) -> ProductRepository:
        """Get product repository instance"""
        return self._instances["product_repository"]

    # Service getters
    def get_fee_strategy(self) -> FeeStrategy:
        return self._instances["fee_strategy"]

    def get_delivery_fee_calculator(self) -> DeliveryFeeCalculator:
        return self._instances["delivery_fee_calculator"]

    def get_coupon_validation_service(self) -> CouponValidationService:
        return self._instances["coupon_validation_service"]

    # Store getters
    def get_cart_store(self) -> CartStore:
        return self._instances["cart_store"]

    def get_discount_store(self) -> DiscountStore:
        return self._instances["discount_store"]

    # Use Case getters
    def get_checkout_pricing_use_case(self) -> CheckoutPricingUseCase:
        """Get checkout pricing use case instance"""
        return self._instances["checkout_pricing_use_case"]

    def get_coupon_application_use_case(self) -> CouponApplicationUseCase:
        """Get coupon application use case instance"""
        return self._instances["coupon_application_use_case"]

    def get_cart_price_sync_use_case(self) -> CartPriceSyncUseCase:
        """Get cart price sync use case instance"""
        return self._instances["cart_price_sync_use_case"]
