from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, Float, DateTime, String, Text, func, CheckConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.delivery_method import DeliveryMethod
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from models.base import Base
from models.order_item import OrderItemDTO


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, unique=True)
    # Server-assigned identifier, NULL until the remote create call succeeds
    remote_id = Column(Integer, nullable=True, unique=True)
    # Client-generated draft identifier, makes submit idempotent per draft
    client_draft_id = Column(String(36), nullable=False, unique=True)
    user_id = Column(Integer, nullable=False)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING_REMOTE_SUBMIT)
    # Raw status string last reported by the server (PREPARING, DELIVERING, ...)
    remote_status = Column(String(50), nullable=True)
    total_amount = Column(Float, nullable=False)
    delivery_cost = Column(Float, nullable=False, default=0.0)
    zone_name = Column(String(100), nullable=True)
    delivery_address = Column(Text, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(32), nullable=False)
    notes = Column(Text, nullable=False, default="")
    payment_method = Column(SQLEnum(PaymentMethod), nullable=False)
    delivery_method = Column(SQLEnum(DeliveryMethod), nullable=False)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now())

    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan', lazy='selectin')

    __table_args__ = (
        CheckConstraint('total_amount >= 0', name='check_order_total_amount_non_negative'),
        CheckConstraint('delivery_cost >= 0', name='check_order_delivery_cost_non_negative'),
    )


class OrderDTO(BaseModel):
    id: int | None = None
    remote_id: int | None = None
    client_draft_id: str | None = None
    user_id: int | None = None
    status: OrderStatus | None = None
    remote_status: str | None = None
    total_amount: float | None = None
    delivery_cost: float | None = 0.0
    zone_name: str | None = None
    delivery_address: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    notes: str | None = ""
    payment_method: PaymentMethod | None = None
    delivery_method: DeliveryMethod | None = None
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemDTO] = []


class OrderLineSnapshotDTO(BaseModel):
    """Copy of a cart line taken when the draft is built."""
    model_config = ConfigDict(frozen=True)

    cart_line_id: int | None = None
    product_id: int
    name: str
    unit_price: float
    image_ref: str = ""
    quantity: int

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class OrderDraftDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    draft_id: str
    user_id: int
    lines: tuple[OrderLineSnapshotDTO, ...]
    delivery_address: str
    customer_name: str
    customer_phone: str
    notes: str = ""
    payment_method: PaymentMethod
    delivery_method: DeliveryMethod
    zone_name: str
    subtotal: float
    delivery_cost: float
    total: float


# Wire format of the remote order API (camelCase, as served by the backend)
class RemoteOrderItemDTO(BaseModel):
    id: int | None = None
    productId: int
    productName: str = ""
    productPrice: float = 0.0
    productImageUrl: str = ""
    quantity: int


class RemoteOrderDTO(BaseModel):
    id: int
    userId: int | None = None
    status: str
    totalAmount: float
    deliveryAddress: str = ""
    contactPhone: str = ""
    contactName: str = ""
    notes: str | None = ""
    createdAt: str | None = None
    estimatedDeliveryTime: str | None = None
    deliveryFee: float = 0.0
    items: list[RemoteOrderItemDTO] = []


class CreateOrderItemRequestDTO(BaseModel):
    productId: int
    quantity: int


class CreateOrderRequestDTO(BaseModel):
    clientDraftId: str
    items: list[CreateOrderItemRequestDTO]
    deliveryAddress: str
    contactPhone: str
    contactName: str
    notes: str = ""
    paymentMethod: PaymentMethod
    deliveryMethod: DeliveryMethod

    @classmethod
    def from_draft(cls, draft: OrderDraftDTO) -> "CreateOrderRequestDTO":
        return cls(
            clientDraftId=draft.draft_id,
            items=[CreateOrderItemRequestDTO(productId=line.product_id, quantity=line.quantity) for line in draft.lines],
            deliveryAddress=draft.delivery_address,
            contactPhone=draft.customer_phone,
            contactName=draft.customer_name,
            notes=draft.notes,
            paymentMethod=draft.payment_method,
            deliveryMethod=draft.delivery_method,
        )


class RemoteOrderPageDTO(BaseModel):
    orders: list[RemoteOrderDTO] = []
    totalPages: int = 1
    currentPage: int = 0
    totalElements: int = 0
