"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from tracker.api.v1.router import api_router
from tracker.core.config import settings
from tracker.core.exceptions import AppException, setup_exception_handlers
from tracker.core.logging import get_logger, setup_logging
from tracker.core.rate_limit import limiter
from tracker.db import session as db_session
from tracker.db.init_db import create_tables, seed_initial_data
from tracker.deps import di_container
from tracker.services.bank_holiday_sync_service import BankHolidaySyncService

logger = get_logger(__name__)


async def sync_bank_holidays_on_startup(container: di_container.Container) -> None:
    """Run the monthly bank holiday sync; failures are logged and startup continues."""
    try:
        async with db_session.session_scope() as session:
            service = BankHolidaySyncService(
                session,
                container.bank_holiday_feed(),
                container.clock(),
                container.event_bus(),
            )
            result = await service.sync()
        logger.info(f"Startup bank holiday sync: {result.message}")
    except (AppException, SQLAlchemyError) as e:
        logger.warning(f"Startup bank holiday sync failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Initializes logging, DB, reference data, the DI container and the bank holiday sync.
    """
    # Startup
    setup_logging()

    await init_database()

    container = di_container.build_container()
    app.state.container = container
    di_container._container = container

    if settings.BANK_HOLIDAY_SYNC_ON_STARTUP:
        await sync_bank_holidays_on_startup(container)

    yield

    # Shutdown
    await container.http_client().close()
    await db_session.close_db()


async def init_database() -> None:
    await db_session.init_db()
    if settings.AUTO_CREATE_TABLES:
        await create_tables(db_session.engine)
        async with db_session.session_scope() as session:
            await seed_initial_data(session)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Staff performance tracking API",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    setup_exception_handlers(app)

    return app


app = create_app()
