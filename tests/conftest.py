"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys

import pytest
import pytest_asyncio

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Must be set before config is imported anywhere
os.environ.setdefault("RUNTIME_ENVIRONMENT", "TEST")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DELIVERY_CITY", "volzhsk")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from db import build_session_maker, create_db_and_tables
from enums.delivery_method import DeliveryMethod
from enums.payment_method import PaymentMethod
from models.cart_line import ProductDTO
from models.session_context import SessionContext
from order_api.fake import InMemoryOrderApi
from services.cart import CartStore
from services.delivery_pricing import DeliveryPricingService
from services.order_builder import OrderBuilder
from services.order_submission import OrderSubmissionPipeline
from services.zone_resolver import ZoneResolver


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def session_maker(tmp_path):
    """
    Session factory over a throwaway SQLite file.

    A file rather than :memory: so every session sees the same database.
    """
    engine, maker = build_session_maker(f"sqlite+aiosqlite:///{tmp_path / 'storefront_test.db'}")
    await create_db_and_tables(engine)

    yield maker

    await engine.dispose()


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def pricing():
    return DeliveryPricingService.from_config()


@pytest.fixture
def resolver(pricing):
    return ZoneResolver(pricing)


@pytest.fixture
def builder(resolver, pricing):
    return OrderBuilder(resolver, pricing)


@pytest_asyncio.fixture
async def cart_store(session_maker):
    return CartStore(session_maker)


@pytest.fixture
def order_api():
    return InMemoryOrderApi()


@pytest_asyncio.fixture
async def pipeline(order_api, cart_store, session_maker):
    return OrderSubmissionPipeline(order_api, cart_store, session_maker)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def context():
    return SessionContext(user_id=7, auth_token="test-token")


@pytest.fixture
def margherita():
    return ProductDTO(id=1, name="Маргарита", price=500.0, image_url="https://cdn.example/1.jpg")


@pytest.fixture
def pepperoni():
    return ProductDTO(id=2, name="Пепперони", price=650.0, image_url="https://cdn.example/2.jpg")


@pytest.fixture
def checkout_form():
    """Valid checkout form input, override single fields per test."""
    return {
        "address": "г. Волжск, мкр Дружба, ул. Ленина 5",
        "name": "Иван",
        "phone": "+7 (999) 123-45-67",
        "notes": "Домофон 12",
        "payment_method": PaymentMethod.CARD_ON_DELIVERY,
        "delivery_method": DeliveryMethod.DELIVERY,
    }


@pytest_asyncio.fixture
async def filled_cart(cart_store, pepperoni):
    """Cart worth 1300 (2 x 650)."""
    await cart_store.add(pepperoni, 2)
    return cart_store


@pytest_asyncio.fixture
async def draft(builder, context, filled_cart, checkout_form):
    lines = await filled_cart.snapshot()
    return builder.build(context, lines, **checkout_form)
