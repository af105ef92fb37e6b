"""
Health service.
Reports uptime, database connectivity and whether the bank holiday feed has
been imported this month.
"""

import time
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock, SystemClock
from tracker.core.config import settings
from tracker.services.base_service import BaseService
from tracker.services.bank_holiday_sync_service import LAST_SYNC_KEY, should_sync
from tracker.db.repositories.health_repository import HealthRepository
from tracker.schemas.health import HealthResponse


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self, clock: Clock = None):
        self.clock = clock or SystemClock()
        self.start_time = time.time()

    async def get_health(self, session: AsyncSession) -> HealthResponse:
        """
        Get system health status.

        A missing or stale bank holiday import is reported but does not make
        the service degraded; working days still compute from stored rows.

        Args:
            session: Request database session used for the checks

        Returns:
            HealthResponse with status, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)

        repo = HealthRepository(session=session)
        checks = {"database": "ok" if await repo.check_database() else "error"}

        last_synced = None
        if checks["database"] == "ok":
            last_synced = await repo.last_bank_holiday_sync(LAST_SYNC_KEY)
            checks["bank_holidays"] = "stale" if should_sync(last_synced, self.clock.now()) else "ok"

        return HealthResponse(
            status="ok" if checks["database"] == "ok" else "degraded",
            version=settings.VERSION,
            uptime=f"PT{uptime_seconds}S",
            checks=checks,
            bank_holidays_last_synced=last_synced,
        )
