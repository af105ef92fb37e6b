"""
Health repository: store connectivity and reference-data freshness.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from tracker.db.repositories.sync_marker_repository import SyncMarkerRepository

logger = logging.getLogger(__name__)


class HealthRepository:
    """Read-only probes used by the health endpoint."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_database(self) -> bool:
        """True when the store answers a trivial query."""
        try:
            result = await self.session.execute(text("SELECT 1"))
            return result.scalar() == 1
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    async def last_bank_holiday_sync(self, key: str) -> Optional[datetime]:
        """When the bank holiday feed was last imported, None if never."""
        return await SyncMarkerRepository(self.session).get_last_synced(key)
