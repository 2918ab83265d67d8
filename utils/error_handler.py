"""
Error Handler Utility

Maps storefront exceptions to user-facing message keys. Presentation layers
(API routes, UI clients) look the key up in their own message catalogue and
format it with the exception's details.

Usage:
    from utils.error_handler import handle_service_error

    try:
        draft = builder.build(...)
    except StorefrontException as e:
        message_key, params = handle_service_error(e)
"""

import logging

from exceptions import (
    StorefrontException,
    EmptyCartException,
    InvalidAddressException,
    InvalidPhoneException,
    InvalidNameException,
    CartLineNotFoundException,
    InvalidQuantityException,
    OrderNotFoundException,
    StateConflictException,
    OrderSubmissionFailedException,
    MissingConfirmationUrlException,
    TransportException,
)

logger = logging.getLogger(__name__)

ERROR_MAPPING = {
    # Checkout validation
    EmptyCartException: "error_empty_cart",
    InvalidAddressException: "error_invalid_address",
    InvalidPhoneException: "error_invalid_phone",
    InvalidNameException: "error_invalid_name",

    # Cart
    CartLineNotFoundException: "error_cart_line_not_found",
    InvalidQuantityException: "error_invalid_quantity",

    # Order
    OrderNotFoundException: "error_order_not_found",
    StateConflictException: "error_order_invalid_state",
    OrderSubmissionFailedException: "error_order_submit_failed",

    # Payment
    MissingConfirmationUrlException: "error_payment_unavailable",

    # Remote API
    TransportException: "error_network",
}


def handle_service_error(exception: StorefrontException) -> tuple[str, dict]:
    """
    Convert a service exception to a message key and its format parameters.

    Returns:
        tuple: (message_key, params)

    Example:
        >>> handle_service_error(OrderNotFoundException(123))
        ('error_order_not_found', {'order_id': 123})
    """
    logger.warning(f"Service error handled: {type(exception).__name__} - {exception}")

    message_key = ERROR_MAPPING.get(type(exception))
    if message_key is None:
        logger.error(f"Unmapped exception type: {type(exception).__name__}")
        return "error_unexpected", {}

    return message_key, dict(exception.details)


def handle_unexpected_error(exception: Exception) -> tuple[str, dict]:
    """Anything that is not a StorefrontException. Logged with traceback."""
    logger.error(f"Unexpected error: {type(exception).__name__} - {exception}", exc_info=exception)
    return "error_unexpected", {}


def is_retryable(exception: Exception) -> bool:
    """Whether repeating the same call may succeed (network trouble, failed submit)."""
    return bool(getattr(exception, "retryable", False))
