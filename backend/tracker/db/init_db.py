"""
Database initialization and bootstrapping.
Creates tables when configured to and seeds reference data.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from tracker.core.config import settings
from tracker.core.logging import get_logger
from tracker.db.base import Base
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.db.repositories.target_repository import DistributionRuleRepository
import tracker.models  # noqa: F401  registers every model with Base
from tracker.utils.sa_redistribution import DEFAULT_DISTRIBUTION_RULES

logger = get_logger(__name__)

DEFAULT_SERVICES = ("Accounts", "VAT", settings.SELF_ASSESSMENT_SERVICE_NAME)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables.
    Only used when AUTO_CREATE_TABLES is set and in tests; production schemas
    are managed outside the application.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")


async def seed_initial_data(session: AsyncSession) -> None:
    """
    Seed the default services and Self Assessment distribution rules.
    Existing rows are left untouched.
    """
    service_repo = ServiceRepository(session)
    for service_name in DEFAULT_SERVICES:
        if await service_repo.get_by_name(service_name) is None:
            await service_repo.create(service_name=service_name)
            logger.info(f"Seeded service {service_name}")

    rule_repo = DistributionRuleRepository(session)
    if not await rule_repo.list_rules():
        for rule in DEFAULT_DISTRIBUTION_RULES:
            await rule_repo.create(
                period_name=rule.period_name,
                months=list(rule.months),
                percentage=rule.percentage,
            )
        logger.info("Seeded default distribution rules")

    await session.commit()
