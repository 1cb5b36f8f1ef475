"""
Delivery fee calculator

Prices delivery for every vendor represented in the cart and aggregates the
result. Each vendor delivers separately, so a cart spanning several vendors
pays the sum of their fees.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from src.domain.entities.address import Address
from src.domain.entities.vendor import Vendor
from src.domain.value_objects.money import Money
from src.infrastructure.utilities.constants import BusinessSettings, GeoSettings
from src.infrastructure.utilities.helpers import haversine_km

logger = logging.getLogger(__name__)


class FeeStrategy(ABC):
    """Computes the undiscounted delivery fee of one vendor"""

    @abstractmethod
    def vendor_fee(self, vendor: Vendor, distance_km: Optional[float]) -> Money:
        """Fee for delivering from ``vendor``; ``distance_km`` is None when unknown"""


class FlatFeeStrategy(FeeStrategy):
    """Every vendor charges its configured base fee"""

    def vendor_fee(self, vendor: Vendor, distance_km: Optional[float]) -> Money:
        return vendor.base_delivery_fee

    def __repr__(self) -> str:
        return "FlatFeeStrategy()"


class DistanceFeeStrategy(FeeStrategy):
    """Base fee plus the vendor's per-km rate for the delivery distance"""

    def vendor_fee(self, vendor: Vendor, distance_km: Optional[float]) -> Money:
        if distance_km is None or vendor.per_km_rate is None:
            return vendor.base_delivery_fee
        return vendor.base_delivery_fee + vendor.per_km_rate * distance_km

    def __repr__(self) -> str:
        return "DistanceFeeStrategy()"


class FreeDeliveryReason(Enum):
    """Why the whole order ships free"""

    COUPON = "coupon"
    MINIMUM_ORDER = "minimum_order"


@dataclass(frozen=True)
class VendorDeliveryFee:
    """Delivery fee of one vendor, recomputed on every pricing pass"""

    vendor_id: str
    fee: Money
    original_fee: Money
    is_free: bool
    distance_km: Optional[float] = None

    @property
    def saved(self) -> Money:
        """Amount waived by a free-delivery override"""
        return self.original_fee - self.fee


@dataclass(frozen=True)
class DeliveryFeeRequest:
    """
    Inputs of a delivery pricing pass

    ``vendors`` is None while the vendor lookup is still pending; an empty
    mapping means the lookup finished without finding any of the vendors.
    """

    subtotal: Money
    selected_address: Optional[Address]
    vendor_ids: FrozenSet[str]
    free_delivery_minimum: Money
    has_free_delivery: bool = False
    vendors: Optional[Mapping[str, Vendor]] = field(default_factory=dict)
    vendor_subtotals: Mapping[str, Money] = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryFeeQuote:
    """Result of a delivery pricing pass"""

    vendor_fees: Tuple[VendorDeliveryFee, ...]
    total_delivery_fee: Optional[Money]
    original_delivery_fee: Optional[Money]
    vendor_count: int
    is_free_delivery: bool
    is_calculating: bool
    free_delivery_reason: Optional[FreeDeliveryReason]
    amount_to_free_delivery: Money

    @property
    def delivery_savings(self) -> Money:
        """Total waived by free-delivery overrides"""
        if self.total_delivery_fee is None or self.original_delivery_fee is None:
            return Money.zero(self.amount_to_free_delivery.currency)
        return self.original_delivery_fee - self.total_delivery_fee


class DeliveryFeeCalculator:
    """Aggregates per-vendor delivery fees and applies free-delivery overrides"""

    def __init__(self, strategy: Optional[FeeStrategy] = None, default_fee: Optional[Money] = None):
        self._strategy = strategy or FlatFeeStrategy()
        self._default_fee = default_fee
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def strategy(self) -> FeeStrategy:
        """Fee strategy in use"""
        return self._strategy

    def calculate(self, request: DeliveryFeeRequest) -> DeliveryFeeQuote:
        """Price delivery for the vendors in ``request``"""
        subtotal = request.subtotal
        currency = subtotal.currency
        zero = Money.zero(currency)

        qualifies_by_amount = subtotal >= request.free_delivery_minimum
        is_free_delivery = request.has_free_delivery or qualifies_by_amount
        if request.has_free_delivery:
            reason = FreeDeliveryReason.COUPON
        elif qualifies_by_amount:
            reason = FreeDeliveryReason.MINIMUM_ORDER
        else:
            reason = None
        amount_to_free_delivery = subtotal.shortfall_to(request.free_delivery_minimum)

        def quote(vendor_fees, total, original, is_calculating):
            return DeliveryFeeQuote(
                vendor_fees=tuple(vendor_fees),
                total_delivery_fee=total,
                original_delivery_fee=original,
                vendor_count=len(vendor_fees),
                is_free_delivery=is_free_delivery,
                is_calculating=is_calculating,
                free_delivery_reason=reason,
                amount_to_free_delivery=amount_to_free_delivery,
            )

        if not request.vendor_ids:
            return quote((), zero, zero, False)

        if request.selected_address is None or request.vendors is None:
            self._logger.debug(
                "Delivery pricing pending: address=%s vendors_loaded=%s",
                request.selected_address is not None,
                request.vendors is not None,
            )
            return quote((), None, None, True)

        vendor_fees = [
            self._price_vendor(vendor_id, request, is_free_delivery, currency)
            for vendor_id in sorted(request.vendor_ids)
        ]

        total = sum((fee.fee for fee in vendor_fees), zero)
        original = sum((fee.original_fee for fee in vendor_fees), zero)

        self._logger.info(
            "Delivery priced: vendors=%d total=%s original=%s free=%s",
            len(vendor_fees),
            total,
            original,
            is_free_delivery,
        )
        return quote(vendor_fees, total, original, False)

    def _price_vendor(
        self,
        vendor_id: str,
        request: DeliveryFeeRequest,
        order_ships_free: bool,
        currency: str,
    ) -> VendorDeliveryFee:
        vendor = request.vendors.get(vendor_id)
        address = request.selected_address

        if vendor is None:
            self._logger.warning("Vendor %s missing from lookup, using default fee", vendor_id)
            original_fee = self._default_fee or Money.of(BusinessSettings.DEFAULT_DELIVERY_FEE, currency)
            distance_km = None
        else:
            distance_km = self._distance(vendor, address)
            original_fee = self._strategy.vendor_fee(vendor, distance_km)

        is_free = order_ships_free or self._meets_vendor_threshold(vendor, request)
        return VendorDeliveryFee(
            vendor_id=vendor_id,
            fee=Money.zero(currency) if is_free else original_fee,
            original_fee=original_fee,
            is_free=is_free,
            distance_km=distance_km,
        )

    @staticmethod
    def _meets_vendor_threshold(vendor: Optional[Vendor], request: DeliveryFeeRequest) -> bool:
        if vendor is None or vendor.free_delivery_threshold is None:
            return False
        vendor_subtotal = request.vendor_subtotals.get(vendor.id)
        return vendor_subtotal is not None and vendor_subtotal >= vendor.free_delivery_threshold

    @staticmethod
    def _distance(vendor: Vendor, address: Address) -> Optional[float]:
        # Missing coordinates on either side degrade to base-fee-only pricing
        if not vendor.has_coordinates or not address.has_coordinates:
            return None
        distance = haversine_km(
            vendor.latitude, vendor.longitude, address.latitude, address.longitude
        )
        return round(distance, GeoSettings.DISTANCE_PRECISION)


def build_vendor_index(vendors) -> Dict[str, Vendor]:
    """Index vendor records by id"""
    return {vendor.id: vendor for vendor in vendors}
