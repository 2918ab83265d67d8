"""
Cart Store

Local, persistent collection of cart lines. Mutations are serialized by one
asyncio.Lock per store and committed before the lock is released; observers
are then handed the latest committed list. Reads never take the lock.
"""

import asyncio
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db import get_db_session, session_commit
from exceptions.cart import CartLineNotFoundException, InvalidQuantityException
from models.cart_line import CartLineDTO, ProductDTO
from repositories.cart_line import CartLineRepository

logger = logging.getLogger(__name__)


class CartStore:

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] | None = None):
        self.session_maker = session_maker
        self.lock = asyncio.Lock()
        self._subscribers: set[asyncio.Queue] = set()

    async def add(self, product: ProductDTO, quantity: int = 1) -> CartLineDTO:
        """
        Add a product to the cart.

        An existing line for the same product has its quantity incremented,
        otherwise a new line is created with the product's current price as
        the unit price snapshot.

        Raises:
            InvalidQuantityException: quantity < 1
        """
        if quantity < 1:
            raise InvalidQuantityException(product.id, quantity)

        async with self.lock:
            async with get_db_session(self.session_maker) as session:
                existing = await CartLineRepository.get_by_product_id(product.id, session)
                if existing is not None:
                    new_quantity = existing.quantity + quantity
                    await CartLineRepository.update_quantity(existing.id, new_quantity, session)
                    line_id = existing.id
                    logger.debug(f"Cart line {line_id} quantity {existing.quantity} -> {new_quantity}")
                else:
                    line_id = await CartLineRepository.create(CartLineDTO(
                        product_id=product.id,
                        name=product.name,
                        unit_price=product.price,
                        image_ref=product.image_url,
                        quantity=quantity,
                    ), session)
                    logger.debug(f"Cart line {line_id} created for product {product.id}")
                await session_commit(session)
                line = await CartLineRepository.get_by_id(line_id, session)
            lines = await self.snapshot()
        self._emit(lines)
        return line

    async def set_quantity(self, line_id: int, quantity: int) -> None:
        """Set a line's quantity. Anything below 1 removes the line."""
        async with self.lock:
            async with get_db_session(self.session_maker) as session:
                line = await CartLineRepository.get_by_id(line_id, session)
                if line is None:
                    raise CartLineNotFoundException(line_id)
                if quantity < 1:
                    await CartLineRepository.delete(line_id, session)
                else:
                    await CartLineRepository.update_quantity(line_id, quantity, session)
                await session_commit(session)
            lines = await self.snapshot()
        self._emit(lines)

    async def remove(self, line_id: int) -> None:
        async with self.lock:
            async with get_db_session(self.session_maker) as session:
                await CartLineRepository.delete(line_id, session)
                await session_commit(session)
            lines = await self.snapshot()
        self._emit(lines)

    async def clear(self) -> None:
        async with self.lock:
            async with get_db_session(self.session_maker) as session:
                await CartLineRepository.clear(session)
                await session_commit(session)
            lines = await self.snapshot()
        self._emit(lines)
        logger.info("Cart cleared")

    async def remove_lines(self, line_ids: list[int], session: AsyncSession) -> None:
        """
        Delete lines inside the caller's transaction.

        The caller holds self.lock, commits the session, takes a snapshot while
        still holding the lock and passes it to notify() once released.
        """
        await CartLineRepository.delete_many(line_ids, session)

    async def notify(self, lines: list[CartLineDTO] | None = None) -> None:
        """Hand observers lines, a snapshot taken under self.lock, or a fresh read."""
        self._emit(lines if lines is not None else await self.snapshot())

    async def snapshot(self) -> list[CartLineDTO]:
        async with get_db_session(self.session_maker) as session:
            return await CartLineRepository.get_all(session)

    async def observe(self) -> AsyncIterator[list[CartLineDTO]]:
        """
        Yield the current lines, then the latest list after every mutation.

        Slow consumers only ever see the newest state; intermediate lists are dropped.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._subscribers.add(queue)
        try:
            yield await self.snapshot()
            while True:
                yield await queue.get()
        finally:
            self._subscribers.discard(queue)

    async def subtotal(self) -> float:
        return sum(line.line_total for line in await self.snapshot())

    async def count(self) -> int:
        async with get_db_session(self.session_maker) as session:
            return await CartLineRepository.count(session)

    async def contains(self, product_id: int) -> bool:
        async with get_db_session(self.session_maker) as session:
            return await CartLineRepository.get_by_product_id(product_id, session) is not None

    def _emit(self, lines: list[CartLineDTO]) -> None:
        for queue in self._subscribers:
            # Latest value wins
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(lines)
