"""
Logging Infrastructure

JSON file logging, structlog configuration and operation timing.
"""

from .logging_config import (
    PerformanceLogger,
    PricingJsonFormatter,
    ProductionLogger,
    configure_structlog,
    get_structured_logger,
)

__all__ = [
    "PerformanceLogger",
    "PricingJsonFormatter",
    "ProductionLogger",
    "configure_structlog",
    "get_structured_logger",
]
