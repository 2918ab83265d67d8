"""In-memory order API used in tests and offline development."""

import asyncio
import itertools
import logging
from datetime import datetime

from enums.payment_method import PaymentMethod
from exceptions.transport import TransportException
from models.order import OrderDraftDTO, RemoteOrderDTO, RemoteOrderItemDTO
from models.payment import PaymentRedirectDTO
from order_api.base import OrderApi

logger = logging.getLogger(__name__)


class InMemoryOrderApi(OrderApi):
    """
    Behaves like the backend, minus the network.

    Failure injection:
        fail_next(count, status_code) - the next `count` calls raise TransportException
        create_delay - seconds create_order sleeps before answering
    """

    def __init__(self, first_id: int = 1000, create_delay: float = 0.0):
        self.orders: dict[int, RemoteOrderDTO] = {}
        self.create_calls: list[OrderDraftDTO] = []
        self.payments: list[PaymentRedirectDTO] = []
        self.create_delay = create_delay
        self._ids = itertools.count(first_id)
        self._by_draft_id: dict[str, int] = {}
        self._failures: list[int | None] = []

    def fail_next(self, count: int = 1, status_code: int | None = None) -> None:
        self._failures.extend([status_code] * count)

    def set_remote_status(self, remote_id: int, status: str) -> None:
        self.orders[remote_id] = self.orders[remote_id].model_copy(update={"status": status})

    def _maybe_fail(self, operation: str) -> None:
        if self._failures:
            status_code = self._failures.pop(0)
            reason = f"HTTP {status_code}" if status_code else "connection refused"
            raise TransportException(operation, reason, status_code)

    async def create_order(self, draft: OrderDraftDTO) -> int:
        self.create_calls.append(draft)
        if self.create_delay:
            await asyncio.sleep(self.create_delay)
        self._maybe_fail("create_order")

        # Same draft twice means a retried request, answer with the same order
        if draft.draft_id in self._by_draft_id:
            return self._by_draft_id[draft.draft_id]

        remote_id = next(self._ids)
        self.orders[remote_id] = RemoteOrderDTO(
            id=remote_id,
            userId=draft.user_id,
            status="PENDING",
            totalAmount=draft.total,
            deliveryAddress=draft.delivery_address,
            contactPhone=draft.customer_phone,
            contactName=draft.customer_name,
            notes=draft.notes,
            createdAt=datetime.now().isoformat(),
            deliveryFee=draft.delivery_cost,
            items=[
                RemoteOrderItemDTO(
                    productId=line.product_id,
                    productName=line.name,
                    productPrice=line.unit_price,
                    productImageUrl=line.image_ref,
                    quantity=line.quantity,
                )
                for line in draft.lines
            ],
        )
        self._by_draft_id[draft.draft_id] = remote_id
        logger.debug(f"[InMemoryOrderApi] Created order {remote_id} for draft {draft.draft_id}")
        return remote_id

    async def get_order(self, remote_id: int) -> RemoteOrderDTO:
        self._maybe_fail("get_order")
        if remote_id not in self.orders:
            raise TransportException("get_order", "HTTP 404: order not found", 404)
        return self.orders[remote_id]

    async def list_orders(self, user_id: int) -> list[RemoteOrderDTO]:
        self._maybe_fail("list_orders")
        return [order for order in self.orders.values() if order.userId == user_id]

    async def update_order_status(self, remote_id: int, status: str) -> RemoteOrderDTO:
        self._maybe_fail("update_order_status")
        if remote_id not in self.orders:
            raise TransportException("update_order_status", "HTTP 404: order not found", 404)
        self.set_remote_status(remote_id, status)
        return self.orders[remote_id]

    async def create_payment(self, order_id: int, amount: float, method: PaymentMethod,
                             return_url: str | None = None) -> PaymentRedirectDTO:
        self._maybe_fail("create_payment")
        payment = PaymentRedirectDTO(
            id=f"pay-{order_id}-{len(self.payments) + 1}",
            orderId=order_id,
            status="PENDING",
            confirmationUrl=f"https://yoomoney.example/checkout?orderId={order_id}",
        )
        self.payments.append(payment)
        return payment
