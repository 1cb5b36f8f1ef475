"""
Utility functions for the pricing engine
"""

import math
from datetime import UTC, datetime
from decimal import Decimal
from typing import Union

from .constants import GeoSettings

CURRENCY_SYMBOLS = {"INR": "₹"}


def format_price(price: Union[float, Decimal], currency: str = "INR") -> str:
    """Format price with currency"""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{price:.0f}" if Decimal(str(price)) % 1 == 0 else f"{symbol}{price:.2f}"
    return f"{price:.2f} {currency}"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in kilometers"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return GeoSettings.EARTH_RADIUS_KM * c


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes coming from the data store as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def utc_now() -> datetime:
    """Current time in UTC"""
    return datetime.now(UTC)
