"""
Order-related exceptions.
"""

from .base import StorefrontException


class OrderException(StorefrontException):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundException(OrderException):
    """Raised when order is not found in the local store."""

    def __init__(self, order_id: int):
        super().__init__(
            f"Order {order_id} not found",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class StateConflictException(OrderException):
    """Raised when a status transition is not allowed from the order's current status."""

    def __init__(self, order_id: int, current_state: str, requested_state: str):
        super().__init__(
            f"Order {order_id} cannot move from '{current_state}' to '{requested_state}'",
            details={'order_id': order_id, 'current_state': current_state, 'requested_state': requested_state}
        )
        self.order_id = order_id
        self.current_state = current_state
        self.requested_state = requested_state


class OrderSubmissionFailedException(OrderException):
    """
    Raised when the remote create call fails.

    The order is kept locally in PENDING_REMOTE_SUBMIT and the cart is not
    cleared, so the caller can retry with OrderSubmissionPipeline.retry().
    """

    retryable = True

    def __init__(self, local_order_id: int, reason: str):
        super().__init__(
            f"Order {local_order_id} saved locally but remote submit failed: {reason}",
            details={'local_order_id': local_order_id, 'reason': reason}
        )
        self.local_order_id = local_order_id
        self.reason = reason
