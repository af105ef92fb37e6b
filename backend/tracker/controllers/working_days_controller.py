"""
Working days controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.clock import Clock
from tracker.services.working_days_service import WorkingDaysService
from tracker.schemas.working_days import WorkingDayQuery, WorkingDaysResult


class WorkingDaysController(BaseController):
    """Controller for working day calculations."""

    def __init__(self, session: AsyncSession, clock: Clock):
        self.working_days_service = WorkingDaysService(session, clock)

    async def get_working_days(self, query: WorkingDayQuery) -> WorkingDaysResult:
        return await self.working_days_service.compute(query)
