from pydantic import BaseModel
from sqlalchemy import Column, Integer, Float, String, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base import Base


class OrderItem(Base):
    __tablename__ = 'order_items'

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_item_quantity_positive'),
        CheckConstraint('unit_price >= 0', name='ck_order_item_price_non_negative'),
        Index('ix_order_items_order_id', 'order_id'),
    )

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    product_id = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    unit_price = Column(Float, nullable=False)
    image_ref = Column(String(1024), nullable=False, default="")
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


class OrderItemDTO(BaseModel):
    id: int | None = None
    order_id: int | None = None
    product_id: int
    name: str
    unit_price: float
    image_ref: str = ""
    quantity: int

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity
