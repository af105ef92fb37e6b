"""
Database session management with async SQLAlchemy 2.0.

The engine and sessionmaker are module globals created on first use, so
tests and scripts can point them at another URL before anything connects.
"""

from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from typing import AsyncGenerator, AsyncIterator, Optional

from tracker.core.config import settings
from tracker.core.logging import get_logger

logger = get_logger(__name__)

engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the async engine; PostgreSQL gets a sized pool, SQLite the default."""
    global engine

    url = database_url or settings.DATABASE_URL
    engine_kwargs = {
        "echo": settings.DATABASE_ECHO,
        "pool_pre_ping": True,
    }
    if not url.startswith("sqlite"):
        engine_kwargs.update(pool_size=5, max_overflow=10)

    engine = create_async_engine(url, **engine_kwargs)
    logger.info("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def create_sessionmaker() -> async_sessionmaker[AsyncSession]:
    global async_session_maker

    if engine is None:
        create_engine()

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return async_session_maker


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Session for work outside a request, such as startup tasks.
    Commits on success and rolls back on any error.
    """
    if async_session_maker is None:
        create_sessionmaker()

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed when the handler succeeds."""
    async with session_scope() as session:
        yield session


async def init_db() -> None:
    """Create the engine and sessionmaker if they do not exist yet."""
    if engine is None:
        create_engine()

    if async_session_maker is None:
        create_sessionmaker()

    logger.info("Database initialized")


async def close_db() -> None:
    global engine, async_session_maker

    if engine:
        await engine.dispose()
        engine = None
        async_session_maker = None
        logger.info("Database connections closed")
