"""
Custom exceptions for the storefront order engine.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── CheckoutValidationException (carries ValidationErrorKind)
│   ├── EmptyCartException
│   ├── InvalidAddressException
│   ├── InvalidPhoneException
│   └── InvalidNameException
├── CartException
│   ├── CartLineNotFoundException
│   └── InvalidQuantityException
├── OrderException
│   ├── OrderNotFoundException
│   ├── StateConflictException
│   └── OrderSubmissionFailedException (retryable)
├── PaymentException
│   └── MissingConfirmationUrlException
└── TransportException (remote API failure)

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id=123)

Callers catch and map them to user-facing messages:
    try:
        draft = OrderBuilder.build(...)
    except CheckoutValidationException as e:
        message_key = handle_service_error(e)
"""

from .base import StorefrontException
from .cart import CartException, CartLineNotFoundException, InvalidQuantityException
from .order import (
    OrderException,
    OrderNotFoundException,
    StateConflictException,
    OrderSubmissionFailedException
)
from .payment import PaymentException, MissingConfirmationUrlException
from .transport import TransportException
from .validation import (
    CheckoutValidationException,
    EmptyCartException,
    InvalidAddressException,
    InvalidPhoneException,
    InvalidNameException
)

__all__ = [
    # Base
    'StorefrontException',

    # Validation
    'CheckoutValidationException',
    'EmptyCartException',
    'InvalidAddressException',
    'InvalidPhoneException',
    'InvalidNameException',

    # Cart
    'CartException',
    'CartLineNotFoundException',
    'InvalidQuantityException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'StateConflictException',
    'OrderSubmissionFailedException',

    # Payment
    'PaymentException',
    'MissingConfirmationUrlException',

    # Transport
    'TransportException',
]
