import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from functools import wraps
from typing import AsyncGenerator

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db import get_db_session, session_commit, session_rollback

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Utility class for running a unit of local store work as one transaction,
    with rollback on any error and retry of transient SQLite lock errors.
    """

    # Transactions slower than this are logged
    SLOW_TRANSACTION_SECONDS = 5

    MAX_RETRIES = 3
    RETRY_DELAY_BASE = 0.05  # Base delay in seconds

    @staticmethod
    @asynccontextmanager
    async def atomic_transaction(
            maker: async_sessionmaker[AsyncSession] | None = None) -> AsyncGenerator[AsyncSession, None]:
        """
        Commit everything done in the block, or nothing.

        Usage:
            async with TransactionManager.atomic_transaction(session_maker) as session:
                await OrderRepository.update_status(order_id, OrderStatus.SUBMITTED, session)
        """
        async with get_db_session(maker) as session:
            transaction_start = datetime.now()
            try:
                yield session
                await session_commit(session)
            except BaseException as e:
                # BaseException so task cancellation rolls back too
                try:
                    await session_rollback(session)
                    logger.info(f"Transaction rolled back due to error: {e!r}")
                except Exception as rollback_error:
                    logger.critical(f"Failed to rollback transaction: {rollback_error}")
                raise

            duration = (datetime.now() - transaction_start).total_seconds()
            if duration > TransactionManager.SLOW_TRANSACTION_SECONDS:
                logger.warning(f"Slow transaction: {duration:.2f}s")
            else:
                logger.debug(f"Transaction committed in {duration:.2f}s")

    @staticmethod
    def with_retry(max_retries: int | None = None, delay_base: float | None = None):
        """
        Decorator for retrying local store operations that hit a locked database.

        Only OperationalError is retried, everything else propagates immediately.
        """
        max_retries = max_retries or TransactionManager.MAX_RETRIES
        delay_base = delay_base or TransactionManager.RETRY_DELAY_BASE

        def decorator(func):
            @wraps(func)
            async def wrapper(*args, **kwargs):
                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except OperationalError as e:
                        if attempt == max_retries:
                            logger.error(f"Function {func.__name__} failed after {max_retries} retries: {e}")
                            raise
                        delay = delay_base * (2 ** attempt)
                        logger.warning(f"Attempt {attempt + 1} failed for {func.__name__}, retrying in {delay:.2f}s: {e}")
                        await asyncio.sleep(delay)

            return wrapper
        return decorator
