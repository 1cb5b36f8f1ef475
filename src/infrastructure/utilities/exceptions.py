"""
Custom exceptions for the pricing engine

Coupon eligibility is always reported as a normal result; exceptions are kept
for rejected coupon applications, unresolvable inputs and data fetch failures.
"""

import logging

logger = logging.getLogger(__name__)


class PricingEngineError(Exception):
    """Base exception for the pricing engine"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or "GENERAL_ERROR"

    @property
    def retryable(self) -> bool:
        """Whether retrying the same operation may succeed"""
        return False


class ValidationError(PricingEngineError):
    """Input validation errors"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, "VALIDATION_ERROR"  # Validation errors are user-friendly
        )
        self.field = field


class BusinessLogicError(PricingEngineError):
    """Business rule violations"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message, user_message or message, error_code or "BUSINESS_ERROR")


class CouponRejectedError(BusinessLogicError):
    """Coupon cannot be applied to the current order"""

    def __init__(self, code: str, reason: str):
        super().__init__(f"Coupon {code} rejected: {reason}", reason, "COUPON_REJECTED")
        self.code = code
        self.reason = reason


class AddressUnresolvedError(BusinessLogicError):
    """No delivery address is available, so delivery cannot be priced"""

    def __init__(self, customer_id: str = None):
        super().__init__(
            f"No delivery address for customer: {customer_id}",
            "Please select a delivery address to continue.",
            "ADDRESS_UNRESOLVED",
        )
        self.customer_id = customer_id


class CartEmptyError(BusinessLogicError):
    """Cart is empty when operation requires items"""

    def __init__(self):
        super().__init__(
            "Cart is empty", "Your cart is empty. Please add some items first.", "CART_EMPTY"
        )


class DataFetchError(PricingEngineError):
    """Fetching records from the data store failed"""

    def __init__(self, message: str, source: str = None):
        super().__init__(
            message,
            "We couldn't load the latest prices. Please try again.",
            "DATA_FETCH_ERROR",
        )
        self.source = source

    @property
    def retryable(self) -> bool:
        return True


class DatabaseError(DataFetchError):
    """Database-related errors"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(message, source=operation)
        self.error_code = "DATABASE_ERROR"
        self.operation = operation


# pylint: disable=too-few-public-methods
class ErrorReporter:
    """Error reporting and monitoring class"""

    @staticmethod
    def report_business_error(error: BusinessLogicError, customer_id: str = None):
        """Report business logic errors for analysis"""
        logger.info(
            "Business error: %s - %s",
            error.error_code,
            error,
            extra={
                "error_code": error.error_code,
                "customer_id": customer_id,
                "error_type": type(error).__name__,
            },
        )


def validate_and_raise(condition: bool, error_class: type, *args, **kwargs):
    """Helper function to validate condition and raise specific error"""
    if not condition:
        raise error_class(*args, **kwargs)
