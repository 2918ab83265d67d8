from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import event, Engine, Result, CursorResult
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine

import config
from models.base import Base
"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.cart_line import CartLine
from models.order import Order
from models.order_item import OrderItem

# HARD DISABLE SQL echo, SQL loggers are silenced in utils/logging_config.py
sql_echo = False

data_folder = Path("data")
if config.DB_URL.startswith("sqlite+aiosqlite:///data/") and data_folder.exists() is False:
    data_folder.mkdir()

engine = create_async_engine(config.DB_URL, echo=sql_echo)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def build_session_maker(url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """
    Create an engine and session factory for an arbitrary database URL.

    Used by tests and tools that need a store other than the configured one.
    """
    other_engine = create_async_engine(url, echo=sql_echo)
    return other_engine, async_sessionmaker(other_engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db_session(maker: async_sessionmaker[AsyncSession] | None = None) -> AsyncGenerator[AsyncSession, None]:
    maker = maker or session_maker
    async with maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def session_execute(stmt, session: AsyncSession) -> Result[Any] | CursorResult[Any]:
    return await session.execute(stmt)


async def session_flush(session: AsyncSession) -> None:
    await session.flush()


async def session_commit(session: AsyncSession) -> None:
    await session.commit()


async def session_rollback(session: AsyncSession) -> None:
    await session.rollback()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def create_db_and_tables(target_engine: AsyncEngine | None = None):
    target_engine = target_engine or engine
    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
