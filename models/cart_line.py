# a cart line is a product snapshot (name, unit price, image) plus a quantity. The
# unit price is captured when the product is added and is never re-fetched, so the
# cart total is insulated from catalog price changes during the session.
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, Float, String, DateTime, CheckConstraint, func

from models.base import Base


class CartLine(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    unit_price = Column(Float, nullable=False)
    image_ref = Column(String(1024), nullable=False, default="")
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now())

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_cart_line_quantity_positive'),
        CheckConstraint('unit_price >= 0', name='check_cart_line_unit_price_non_negative'),
    )


class CartLineDTO(BaseModel):
    id: int | None = None
    product_id: int
    name: str
    unit_price: float
    image_ref: str = ""
    quantity: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class ProductDTO(BaseModel):
    """Catalog product as seen by the cart. Only read at add time."""
    id: int
    name: str
    price: float
    image_url: str = ""
