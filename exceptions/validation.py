"""
Checkout validation exceptions.

Raised by OrderBuilder before any network interaction. Always recoverable
locally and never retried automatically.
"""

from enums.validation_error import ValidationErrorKind
from .base import StorefrontException


class CheckoutValidationException(StorefrontException):
    """Base exception for checkout validation errors."""

    kind: ValidationErrorKind


class EmptyCartException(CheckoutValidationException):
    """Raised when trying to checkout with empty cart."""

    kind = ValidationErrorKind.EMPTY_CART

    def __init__(self, user_id: int | None = None):
        super().__init__(
            f"Cart is empty for user {user_id}",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class InvalidAddressException(CheckoutValidationException):
    """Raised when delivery address is blank or too short to be a street address."""

    kind = ValidationErrorKind.INVALID_ADDRESS

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid delivery address: {reason}",
            details={'reason': reason}
        )
        self.reason = reason


class InvalidPhoneException(CheckoutValidationException):
    """Raised when phone does not match the national phone pattern."""

    kind = ValidationErrorKind.INVALID_PHONE

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid phone number: {reason}",
            details={'reason': reason}
        )
        self.reason = reason


class InvalidNameException(CheckoutValidationException):
    """Raised when customer name is blank or too short."""

    kind = ValidationErrorKind.INVALID_NAME

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid customer name: {reason}",
            details={'reason': reason}
        )
        self.reason = reason
