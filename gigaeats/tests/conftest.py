"""
Test fixtures for the order history backend tests.

Provides:
- In-memory SQLite database for isolated testing
- Async test client with session, cache and "today" overrides
- An order factory for seeding history
"""
# IMPORTANT: Set environment variables BEFORE any other imports
import os

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TIMEZONE", "Asia/Kuala_Lumpur")
os.environ.setdefault("MISSING_TIMESTAMP_POLICY", "skip")

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from gigaeats.app.core.base import Base
from gigaeats.app.core.settings import Settings
from gigaeats.app.main import create_app
from gigaeats.app.api.deps import get_session, get_cache, get_today
from gigaeats.app.models.order import Order


# Test database URL - SQLite in-memory
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Sunday; every API test sees this as "today"
TODAY = date(2026, 10, 18)


# Create test engine with StaticPool for in-memory SQLite
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False,
)

TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class MockCacheService:
    """Mock Redis cache for testing without actual Redis."""

    def __init__(self):
        self._cache = {}

    async def get(self, key: str):
        return self._cache.get(key)

    async def set(self, key: str, value, ttl: int = 300):
        self._cache[key] = value

    async def delete(self, key: str):
        self._cache.pop(key, None)


@pytest.fixture(scope="function")
async def test_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.
    Creates all tables before and drops after each test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def mock_cache() -> MockCacheService:
    """Provide mock cache service for testing."""
    return MockCacheService()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=TEST_DATABASE_URL,
        ENVIRONMENT="development",
        MISSING_TIMESTAMP_POLICY="skip",
    )


@pytest.fixture
async def client(
    test_session: AsyncSession,
    mock_cache: MockCacheService,
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing API endpoints.
    Overrides database, cache and clock dependencies.

    The app's lifespan is not run, so no real engine or Redis is created.
    """
    app = create_app(test_settings)

    async def override_get_session():
        # Fresh session per request, separate from the one seeding data
        async with TestSessionLocal() as session:
            yield session

    async def override_get_cache():
        yield mock_cache

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_cache] = override_get_cache
    app.dependency_overrides[get_today] = lambda: TODAY

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# --- Test Data Factories ---

@pytest.fixture
def make_order(test_session: AsyncSession):
    """
    Factory that stores an order placed `days_ago` days before TODAY.

    `delivered_days_ago` sets actual_delivery_time; leave it None for
    orders that were never delivered.
    """
    async def _make_order(
        vendor_id: str = "v1",
        status: str = "delivered",
        total: str = "10.00",
        days_ago: int = 0,
        hour: int = 12,
        commission: Optional[str] = None,
        customer_id: str = "c1",
        sales_agent_id: Optional[str] = None,
        driver_id: Optional[str] = None,
        delivered_days_ago: Optional[int] = None,
    ) -> Order:
        placed = datetime.combine(TODAY - timedelta(days=days_ago), datetime.min.time()).replace(hour=hour)
        delivered = None
        if delivered_days_ago is not None:
            delivered = datetime.combine(
                TODAY - timedelta(days=delivered_days_ago), datetime.min.time()
            ).replace(hour=hour)

        order_id = str(uuid.uuid4())
        order = Order(
            id=order_id,
            order_number=f"GE-{order_id[:8]}",
            status=status,
            vendor_id=vendor_id,
            customer_id=customer_id,
            sales_agent_id=sales_agent_id,
            assigned_driver_id=driver_id,
            total_amount=Decimal(total),
            commission_amount=Decimal(commission) if commission else None,
            created_at=placed,
            actual_delivery_time=delivered,
        )
        test_session.add(order)
        await test_session.commit()
        await test_session.refresh(order)
        return order

    return _make_order
