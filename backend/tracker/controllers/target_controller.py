"""
Monthly target controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.events import EventBus
from tracker.services.target_service import TargetService
from tracker.schemas.target import MonthlyTargetsSave, MonthlyTargetsResponse
from tracker.utils.financial_year import FinancialYear


class TargetController(BaseController):
    """Controller for monthly target operations."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.target_service = TargetService(session, event_bus)

    async def load_targets(
        self,
        month: int,
        financial_year_start: int,
        staff_id: Optional[int] = None,
    ) -> MonthlyTargetsResponse:
        """Targets for a financial-year month with per-service totals."""
        return await self.target_service.load_targets(month, FinancialYear(financial_year_start), staff_id)

    async def save_targets(self, targets_data: MonthlyTargetsSave) -> MonthlyTargetsResponse:
        """Replace a staff member's targets for a month."""
        return await self.target_service.save_targets(targets_data)
