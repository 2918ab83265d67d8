"""
Payment-related exceptions.
"""

from .base import StorefrontException


class PaymentException(StorefrontException):
    """Base exception for payment-related errors."""
    pass


class MissingConfirmationUrlException(PaymentException):
    """Raised when the provider created a payment but returned nothing to redirect to."""

    def __init__(self, order_id: int, payment_id: str):
        super().__init__(
            f"Payment {payment_id} for order {order_id} has no confirmation URL",
            details={'order_id': order_id, 'payment_id': payment_id}
        )
        self.order_id = order_id
        self.payment_id = payment_id
