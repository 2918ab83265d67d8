from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.order_status import OrderStatus
from models.order import Order, OrderDTO, OrderDraftDTO
from models.order_item import OrderItem


class OrderRepository:
    @staticmethod
    async def create_from_draft(draft: OrderDraftDTO, status: OrderStatus, session: AsyncSession) -> int:
        """Insert the order and an immutable copy of the draft's lines as order items."""
        now = datetime.now()
        order = Order(
            client_draft_id=draft.draft_id,
            user_id=draft.user_id,
            status=status,
            total_amount=draft.total,
            delivery_cost=draft.delivery_cost,
            zone_name=draft.zone_name,
            delivery_address=draft.delivery_address,
            customer_name=draft.customer_name,
            customer_phone=draft.customer_phone,
            notes=draft.notes,
            payment_method=draft.payment_method,
            delivery_method=draft.delivery_method,
            created_at=now,
            updated_at=now,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    image_ref=line.image_ref,
                    quantity=line.quantity,
                )
                for line in draft.lines
            ],
        )
        session.add(order)
        await session_flush(session)
        return order.id

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_remote_id(remote_id: int, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.remote_id == remote_id).execution_options(populate_existing=True)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_draft_id(draft_id: str, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.client_draft_id == draft_id).execution_options(populate_existing=True)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_status(status: OrderStatus, session: AsyncSession) -> list[OrderDTO]:
        stmt = select(Order).where(Order.status == status).order_by(Order.created_at, Order.id)
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def get_by_user_id(user_id: int, session: AsyncSession) -> list[OrderDTO]:
        stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def update_status(order_id: int, status: OrderStatus, session: AsyncSession) -> None:
        stmt = update(Order).where(Order.id == order_id).values(
            status=status,
            updated_at=datetime.now()
        )
        await session_execute(stmt, session)

    @staticmethod
    async def reconcile_remote_id(order_id: int, remote_id: int, session: AsyncSession) -> None:
        """Record the server-assigned id and mark the order submitted."""
        stmt = update(Order).where(Order.id == order_id).values(
            remote_id=remote_id,
            status=OrderStatus.SUBMITTED,
            last_error=None,
            updated_at=datetime.now()
        )
        await session_execute(stmt, session)

    @staticmethod
    async def set_last_error(order_id: int, error: str | None, session: AsyncSession) -> None:
        stmt = update(Order).where(Order.id == order_id).values(
            last_error=error,
            updated_at=datetime.now()
        )
        await session_execute(stmt, session)

    @staticmethod
    async def update_remote_status(order_id: int, remote_status: str, session: AsyncSession) -> None:
        stmt = update(Order).where(Order.id == order_id).values(
            remote_status=remote_status,
            updated_at=datetime.now()
        )
        await session_execute(stmt, session)
