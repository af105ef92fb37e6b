"""
Analytics controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.clock import Clock
from tracker.services.analytics_service import AnalyticsService
from tracker.schemas.analytics import (
    PerformanceSummaryResponse,
    PredictionResponse,
    RunRateResponse,
    StaffPerformanceResponse,
    TeamAnalyticsResponse,
)


class AnalyticsController(BaseController):
    """Controller for dashboard and team analytics."""

    def __init__(self, session: AsyncSession, clock: Clock):
        self.analytics_service = AnalyticsService(session, clock)

    async def get_summary(
        self,
        financial_year_start: int,
        month: int,
        staff_id: Optional[int] = None,
    ) -> PerformanceSummaryResponse:
        return await self.analytics_service.summary(financial_year_start, month, staff_id)

    async def get_run_rate(
        self,
        financial_year_start: int,
        month: int,
        staff_id: Optional[int] = None,
    ) -> RunRateResponse:
        return await self.analytics_service.run_rate(financial_year_start, month, staff_id)

    async def get_prediction(self, financial_year_start: int, month: int, staff_id: int) -> PredictionResponse:
        return await self.analytics_service.prediction(financial_year_start, month, staff_id)

    async def get_staff_performance(
        self,
        financial_year_start: int,
        month: int,
        sort: str = "desc",
    ) -> StaffPerformanceResponse:
        """Per staff delivery for a month in the requested order."""
        return await self.analytics_service.staff_performance(financial_year_start, month, sort)

    async def get_team_analytics(self, financial_year_start: int) -> TeamAnalyticsResponse:
        return await self.analytics_service.team_analytics(financial_year_start)
