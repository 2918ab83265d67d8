from datetime import datetime

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.cart_line import CartLine, CartLineDTO


class CartLineRepository:
    @staticmethod
    async def get_all(session: AsyncSession) -> list[CartLineDTO]:
        stmt = select(CartLine).order_by(CartLine.created_at, CartLine.id)
        lines = await session_execute(stmt, session)
        return [CartLineDTO.model_validate(line, from_attributes=True) for line in lines.scalars().all()]

    @staticmethod
    async def get_by_id(line_id: int, session: AsyncSession) -> CartLineDTO | None:
        stmt = select(CartLine).where(CartLine.id == line_id).execution_options(populate_existing=True)
        line = await session_execute(stmt, session)
        line = line.scalar()
        if line is not None:
            return CartLineDTO.model_validate(line, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_product_id(product_id: int, session: AsyncSession) -> CartLineDTO | None:
        stmt = select(CartLine).where(CartLine.product_id == product_id)
        line = await session_execute(stmt, session)
        line = line.scalar()
        if line is not None:
            return CartLineDTO.model_validate(line, from_attributes=True)
        else:
            return None

    @staticmethod
    async def create(line_dto: CartLineDTO, session: AsyncSession) -> int:
        now = datetime.now()
        line = CartLine(
            product_id=line_dto.product_id,
            name=line_dto.name,
            unit_price=line_dto.unit_price,
            image_ref=line_dto.image_ref,
            quantity=line_dto.quantity,
            created_at=now,
            updated_at=now,
        )
        session.add(line)
        await session_flush(session)
        return line.id

    @staticmethod
    async def update_quantity(line_id: int, quantity: int, session: AsyncSession) -> None:
        stmt = update(CartLine).where(CartLine.id == line_id).values(
            quantity=quantity,
            updated_at=datetime.now()
        )
        await session_execute(stmt, session)

    @staticmethod
    async def delete(line_id: int, session: AsyncSession) -> None:
        stmt = delete(CartLine).where(CartLine.id == line_id)
        await session_execute(stmt, session)

    @staticmethod
    async def delete_many(line_ids: list[int], session: AsyncSession) -> None:
        if not line_ids:
            return
        stmt = delete(CartLine).where(CartLine.id.in_(line_ids))
        await session_execute(stmt, session)

    @staticmethod
    async def clear(session: AsyncSession) -> None:
        await session_execute(delete(CartLine), session)

    @staticmethod
    async def count(session: AsyncSession) -> int:
        stmt = select(func.count(CartLine.id))
        result = await session_execute(stmt, session)
        return result.scalar() or 0
