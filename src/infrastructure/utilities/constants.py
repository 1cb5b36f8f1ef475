"""
Application constants for the pricing engine

Centralizes all magic numbers and hard-coded values to improve maintainability
and follow the "Avoid magic numbers and hard-coded strings" principle.
"""

from typing import Final


# Connection timeout settings
class RetrySettings:
    """Configuration for connection timeouts"""

    CONNECTION_TIMEOUT_SECONDS: Final[int] = 60


# Database configuration constants
class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour

    # Production settings
    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30

    # Development settings
    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10


# Logging configuration constants
class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    PERFORMANCE_LOG_FILE_SIZE: Final[int] = 5 * 1024 * 1024  # 5MB

    # Backup counts
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10
    PERFORMANCE_LOG_BACKUP_COUNT: Final[int] = 5


# File names
class FileSettings:
    """Log file names"""

    MAIN_LOG_FILE: Final[str] = "pricing.log"
    ERROR_LOG_FILE: Final[str] = "errors.log"
    PERFORMANCE_LOG_FILE: Final[str] = "performance.log"


# Cache configuration constants
class CacheSettings:
    """Cache TTL settings"""

    COUPON_CATALOG_TTL_SECONDS: Final[int] = 300  # 5 minutes


# Performance monitoring constants
class PerformanceSettings:
    """Performance thresholds and monitoring settings"""

    SLOW_QUERY_THRESHOLD_MS: Final[int] = 1000


# Business logic constants
class BusinessSettings:
    """Business rules and default values"""

    DEFAULT_CURRENCY: Final[str] = "INR"
    FREE_DELIVERY_MINIMUM: Final[float] = 499.00
    DEFAULT_DELIVERY_FEE: Final[float] = 30.00
    DEFAULT_FEE_STRATEGY: Final[str] = "flat"
    DEFAULT_USAGE_LIMIT_PER_USER: Final[int] = 1


# Geographic constants
class GeoSettings:
    """Values used for distance computations"""

    EARTH_RADIUS_KM: Final[float] = 6371.0
    DISTANCE_PRECISION: Final[int] = 2


# User-facing messages for coupon eligibility
class CouponMessages:
    """Reason strings shown next to ineligible or rejected coupons"""

    FULLY_REDEEMED: Final[str] = "Coupon fully redeemed"
    ALREADY_USED: Final[str] = "You have already used this coupon"
    MIN_ORDER_SHORTFALL: Final[str] = "Add {shortfall} more to cart"
    MIN_ORDER_NOT_MET: Final[str] = "Minimum order amount is {minimum}"
    NOT_FOUND: Final[str] = "Invalid coupon code"
    NOT_ACTIVE: Final[str] = "Coupon is not active"
    NO_VENDOR_ITEMS: Final[str] = "No items from this store in cart"
    NO_CATEGORY_ITEMS: Final[str] = "No items from this category in cart"
    NO_PRODUCT_ITEMS: Final[str] = "Required product not in cart"
    SCOPE_NO_LONGER_MATCHES: Final[str] = "Coupon no longer applies to the items in your cart"
