"""
Daily activity service with business logic.
"""

import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.events import ACTIVITY_UPDATED, EventBus
from tracker.core.exceptions import NotFoundError
from tracker.services.base_service import BaseService
from tracker.db.repositories.activity_repository import ActivityRepository
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.schemas.activity import ActivityUpsert, ActivityResponse, ActivityListResponse

logger = logging.getLogger(__name__)


class ActivityService(BaseService):
    """Service for recording and listing daily activity."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.session = session
        self.event_bus = event_bus
        self.activity_repo = ActivityRepository(session)
        self.staff_repo = StaffRepository(session)
        self.service_repo = ServiceRepository(session)

    async def record_activity(self, activity_data: ActivityUpsert) -> ActivityResponse:
        """Set the delivered count for a staff member, service and day."""
        if await self.staff_repo.get(activity_data.staff_id) is None:
            raise NotFoundError("Staff member not found", details={"staff_id": activity_data.staff_id})
        if await self.service_repo.get(activity_data.service_id) is None:
            raise NotFoundError("Service not found", details={"service_id": activity_data.service_id})

        activity, created = await self.activity_repo.upsert(
            staff_id=activity_data.staff_id,
            service_id=activity_data.service_id,
            day=activity_data.date,
            delivered_count=activity_data.delivered_count,
        )
        await self.session.commit()
        await self.session.refresh(activity)

        logger.info(
            f"{'Recorded' if created else 'Updated'} activity for staff {activity.staff_id} on {activity.date}",
            extra={"service_id": activity.service_id, "delivered_count": activity.delivered_count},
        )
        await self.publish(
            ACTIVITY_UPDATED,
            staff_id=activity.staff_id,
            service_id=activity.service_id,
            date=activity.date,
        )
        return ActivityResponse.model_validate(activity)

    async def list_activities(
        self,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ActivityListResponse:
        """List activity rows with their delivered total."""
        activities = await self.activity_repo.list_activities(staff_id, service_id, start_date, end_date)
        items = [ActivityResponse.model_validate(activity) for activity in activities]
        return ActivityListResponse(
            items=items,
            total=len(items),
            total_delivered=sum(item.delivered_count for item in items),
        )

    async def delete_activity(self, activity_id: int) -> bool:
        activity = await self.activity_repo.get(activity_id)
        if activity is None:
            return False
        staff_id, service_id, day = activity.staff_id, activity.service_id, activity.date
        await self.activity_repo.delete(activity_id)
        await self.session.commit()
        await self.publish(ACTIVITY_UPDATED, staff_id=staff_id, service_id=service_id, date=day)
        return True
