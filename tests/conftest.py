"""
Pytest configuration and fixtures.
Provides test app client, async DB session replacement and a pinned clock.
"""

from datetime import date
from typing import List

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from tracker.main import app
from tracker.core.clock import FixedClock
from tracker.core.events import EventBus
from tracker.core.integrations.bank_holiday_feed import FeedHoliday
from tracker.db.base import Base
from tracker.db.init_db import seed_initial_data
from tracker.db.session import get_db
from tracker.deps.di_container import get_bank_holiday_feed, get_clock, get_event_bus


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# A Monday in the middle of June 2025 (financial year 2025/26)
TODAY = date(2025, 6, 16)


class FakeBankHolidayFeed:
    """Stands in for BankHolidayFeedClient; records how often it was fetched."""

    def __init__(self, holidays: List[FeedHoliday] = None, error: Exception = None):
        self.holidays = holidays or []
        self.error = error
        self.calls = 0

    async def fetch(self) -> List[FeedHoliday]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.holidays)


@pytest.fixture(scope="function")
async def test_engine():
    """
    Create a test engine with all tables and the seeded reference data.
    Uses in-memory SQLite for fast tests.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        await seed_initial_data(session)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """Create a test database session."""
    async with test_session_maker() as session:
        yield session


@pytest.fixture
def clock():
    return FixedClock(TODAY)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def feed_class():
    return FakeBankHolidayFeed


@pytest.fixture
def fake_feed():
    return FakeBankHolidayFeed()


@pytest.fixture(scope="function")
async def test_client(test_session_maker, clock, event_bus, fake_feed):
    """
    Create a test HTTP client with the database, clock, event bus and
    bank holiday feed replaced.
    """
    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    app.dependency_overrides[get_bank_holiday_feed] = lambda: fake_feed

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
