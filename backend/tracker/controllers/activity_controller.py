"""
Daily activity controller.
"""

from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.events import EventBus
from tracker.services.activity_service import ActivityService
from tracker.schemas.activity import ActivityUpsert, ActivityResponse, ActivityListResponse


class ActivityController(BaseController):
    """Controller for daily activity operations."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.activity_service = ActivityService(session, event_bus)

    async def record_activity(self, activity_data: ActivityUpsert) -> ActivityResponse:
        """Record or replace a day's delivered count."""
        return await self.activity_service.record_activity(activity_data)

    async def list_activities(
        self,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ActivityListResponse:
        """List activity with optional filters."""
        return await self.activity_service.list_activities(
            staff_id=staff_id,
            service_id=service_id,
            start_date=start_date,
            end_date=end_date,
        )

    async def delete_activity(self, activity_id: int) -> bool:
        return await self.activity_service.delete_activity(activity_id)
