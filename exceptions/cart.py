"""
Cart-related exceptions.
"""

from .base import StorefrontException


class CartException(StorefrontException):
    """Base exception for cart-related errors."""
    pass


class CartLineNotFoundException(CartException):
    """Raised when cart line not found."""

    def __init__(self, line_id: int):
        super().__init__(
            f"Cart line {line_id} not found",
            details={'line_id': line_id}
        )
        self.line_id = line_id


class InvalidQuantityException(CartException):
    """Raised when adding a product with a quantity below 1."""

    def __init__(self, product_id: int, quantity: int):
        super().__init__(
            f"Invalid quantity {quantity} for product {product_id}, must be >= 1",
            details={'product_id': product_id, 'quantity': quantity}
        )
        self.product_id = product_id
        self.quantity = quantity
