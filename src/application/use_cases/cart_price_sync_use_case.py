"""
Cart price sync use case

Refreshes cart line prices from the catalog before checkout.
"""

import logging

from src.application.dtos.pricing_dtos import CartSyncResponse
from src.application.state.cart_store import CartStore
from src.domain.repositories.product_repository import ProductRepository
from src.infrastructure.utilities.exceptions import DataFetchError

logger = logging.getLogger(__name__)


class CartPriceSyncUseCase:
    """Use case for keeping cart prices in line with the catalog"""

    def __init__(self, product_repository: ProductRepository, cart_store: CartStore):
        self._product_repository = product_repository
        self._cart_store = cart_store
        self._logger = logging.getLogger(self.__class__.__name__)

    async def execute(self) -> CartSyncResponse:
        """
        Reprice every line from current catalog prices

        Products that are gone from the catalog or inactive keep their old
        price and are reported as unavailable.
        """
        before = self._cart_store.state
        if before.is_empty:
            return CartSyncResponse(success=True, cart=before)

        product_ids = [line.product_id for line in before.lines]
        self._logger.info("🔄 CART SYNC: %d products", len(product_ids))

        try:
            prices = await self._product_repository.find_prices(product_ids)
        except DataFetchError as e:
            self._logger.error("💥 CART SYNC FAILED: %s", e)
            return CartSyncResponse(
                success=False, cart=before, error_message=e.user_message, retryable=e.retryable
            )

        active = {pid: price for pid, price in prices.items() if price.is_active}
        unavailable = [pid for pid in product_ids if pid not in active]
        after = self._cart_store.reprice(active)

        updated = [
            line.product_id
            for line in after.lines
            if line != before.get_line(line.product_id)
        ]
        if unavailable:
            self._logger.warning("⚠️ CART SYNC: unavailable products %s", unavailable)
        self._logger.info("✅ CART SYNC DONE: %d lines repriced", len(updated))

        return CartSyncResponse(
            success=True,
            cart=after,
            updated_products=updated,
            unavailable_products=unavailable,
        )
