"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.cart_line import CartLine
from models.order import Order
from models.order_item import OrderItem

__all__ = [
    'Base',
    'CartLine',
    'Order',
    'OrderItem',
]
