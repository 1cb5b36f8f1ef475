"""
Checkout pricing use case

Turns the current cart and discount session into the payable amount shown
on the cart and checkout screens.
"""

import asyncio
import logging
from typing import List, Mapping, Optional

from src.application.dtos.pricing_dtos import CheckoutPricingRequest, PricingResponse
from src.application.request_guard import LatestRequestGuard
from src.application.state.cart_store import CartState
from src.application.state.discount_store import DiscountState
from src.domain.entities.address import Address, pick_default_address
from src.domain.entities.vendor import Vendor
from src.domain.repositories.address_repository import AddressRepository
from src.domain.repositories.vendor_repository import VendorRepository
from src.domain.services.delivery_fee_calculator import (
    DeliveryFeeCalculator,
    DeliveryFeeRequest,
    build_vendor_index,
)
from src.domain.services.order_pricing import OrderPricing, price_order
from src.domain.value_objects.money import Money
from src.infrastructure.utilities.exceptions import AddressUnresolvedError, DataFetchError

logger = logging.getLogger(__name__)


class CheckoutPricingUseCase:
    """
    Use case for pricing the cart

    Handles:
    1. Resolving the delivery address
    2. Loading vendor delivery configuration
    3. Aggregating delivery fees and the active discount into a grand total

    Overlapping calls follow last-request-wins: a pass that finishes after a
    newer one has started is reported as stale and must not be shown.
    """

    def __init__(
        self,
        address_repository: AddressRepository,
        vendor_repository: VendorRepository,
        delivery_calculator: DeliveryFeeCalculator,
        free_delivery_minimum: Money,
    ):
        self._address_repository = address_repository
        self._vendor_repository = vendor_repository
        self._delivery_calculator = delivery_calculator
        self._free_delivery_minimum = free_delivery_minimum
        self._guard = LatestRequestGuard()
        self._logger = logging.getLogger(self.__class__.__name__)

    async def execute(self, request: CheckoutPricingRequest) -> PricingResponse:
        """Fetch addresses and vendors, then price the order"""
        token = self._guard.begin()
        cart = request.cart
        self._logger.info(
            "💰 PRICING: customer=%s items=%d subtotal=%s request=%d",
            request.customer_id,
            cart.total_items,
            cart.subtotal,
            token,
        )

        if cart.is_empty:
            pricing = self.price(cart, request.discount, None, {})
            return PricingResponse(success=True, pricing=pricing)

        try:
            addresses, vendors = await asyncio.gather(
                self._address_repository.find_by_customer(request.customer_id),
                self._vendor_repository.find_by_ids(cart.vendor_ids),
            )
        except DataFetchError as e:
            self._logger.error("💥 PRICING FETCH FAILED (request %d): %s", token, e)
            return PricingResponse(
                success=False,
                error_message=e.user_message,
                retryable=e.retryable,
                stale=not self._guard.is_current(token),
            )

        if not self._guard.is_current(token):
            self._logger.info("⏭️ PRICING DISCARDED: request %d superseded", token)
            return PricingResponse(success=False, stale=True)

        address = self._resolve_address(addresses, request.address_id)
        pricing = self.price(cart, request.discount, address, build_vendor_index(vendors))

        if address is None:
            error = AddressUnresolvedError(request.customer_id)
            self._logger.warning("⚠️ PRICING PENDING: %s", error)
            return PricingResponse(success=True, pricing=pricing, error_message=error.user_message)

        self._logger.info(
            "✅ PRICING DONE: delivery=%s discount=%s total=%s",
            pricing.delivery.total_delivery_fee,
            pricing.discount_amount,
            pricing.grand_total,
        )
        return PricingResponse(success=True, pricing=pricing, selected_address=address)

    def price(
        self,
        cart: CartState,
        discount: DiscountState,
        address: Optional[Address],
        vendors: Optional[Mapping[str, Vendor]],
    ) -> OrderPricing:
        """Price already-loaded inputs; ``vendors`` is None while the lookup is pending"""
        subtotal = cart.subtotal
        quote = self._delivery_calculator.calculate(
            DeliveryFeeRequest(
                subtotal=subtotal,
                selected_address=address,
                vendor_ids=cart.vendor_ids,
                free_delivery_minimum=self._free_delivery_minimum,
                has_free_delivery=discount.has_free_delivery,
                vendors=vendors,
                vendor_subtotals=cart.vendor_subtotals(),
            )
        )
        return price_order(
            subtotal,
            quote,
            discount.discount_amount_in(cart.currency),
            discount.code,
        )

    @staticmethod
    def _resolve_address(addresses: List[Address], address_id: Optional[str]) -> Optional[Address]:
        if address_id is not None:
            for address in addresses:
                if address.id == address_id:
                    return address
        return pick_default_address(addresses)
