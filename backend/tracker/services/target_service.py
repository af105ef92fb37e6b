"""
Monthly target service: load and save per-service targets for a month.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.events import TARGETS_SAVED, EventBus
from tracker.core.exceptions import InvalidInputError, NotFoundError
from tracker.services.base_service import BaseService
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.db.repositories.target_repository import MonthlyTargetRepository
from tracker.schemas.target import MonthlyTargetsSave, MonthlyTargetResponse, MonthlyTargetsResponse
from tracker.utils.financial_year import FinancialYear

logger = logging.getLogger(__name__)


class TargetService(BaseService):
    """Service for monthly targets."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.session = session
        self.event_bus = event_bus
        self.target_repo = MonthlyTargetRepository(session)
        self.staff_repo = StaffRepository(session)
        self.service_repo = ServiceRepository(session)

    async def load_targets(
        self,
        month: int,
        financial_year: FinancialYear,
        staff_id: Optional[int] = None,
    ) -> MonthlyTargetsResponse:
        """
        Targets for a financial-year month, totalled per service.

        Args:
            month: Calendar month (1-12)
            financial_year: Financial year the month belongs to
            staff_id: Limit to one staff member; None for the whole team

        Returns:
            MonthlyTargetsResponse with per-service totals and the rows
        """
        year = financial_year.calendar_year_for(month)
        rows = await self.target_repo.list_for_month(month, year, staff_id=staff_id)

        per_service: dict[int, int] = {}
        for row in rows:
            per_service[row.service_id] = per_service.get(row.service_id, 0) + (row.target_value or 0)

        return MonthlyTargetsResponse(
            month=month,
            year=year,
            per_service=per_service,
            total_target=sum(per_service.values()),
            rows=[MonthlyTargetResponse.model_validate(row) for row in rows],
        )

    async def save_targets(self, targets_data: MonthlyTargetsSave) -> MonthlyTargetsResponse:
        """Replace a staff member's targets for one month."""
        if await self.staff_repo.get(targets_data.staff_id) is None:
            raise NotFoundError("Staff member not found", details={"staff_id": targets_data.staff_id})

        service_ids = [target.service_id for target in targets_data.targets]
        if len(service_ids) != len(set(service_ids)):
            raise InvalidInputError("Each service may only appear once")
        for service_id in service_ids:
            if await self.service_repo.get(service_id) is None:
                raise NotFoundError("Service not found", details={"service_id": service_id})

        financial_year = FinancialYear(targets_data.financial_year_start)
        year = financial_year.calendar_year_for(targets_data.month)

        await self.target_repo.delete_for_month(targets_data.staff_id, targets_data.month, year)
        for target in targets_data.targets:
            await self.target_repo.create(
                staff_id=targets_data.staff_id,
                service_id=target.service_id,
                month=targets_data.month,
                year=year,
                target_value=target.target_value,
            )
        await self.session.commit()

        logger.info(
            f"Saved {len(targets_data.targets)} targets for staff {targets_data.staff_id} {targets_data.month}/{year}"
        )
        await self.publish(
            TARGETS_SAVED,
            staff_id=targets_data.staff_id,
            month=targets_data.month,
            year=year,
        )
        return await self.load_targets(targets_data.month, financial_year, targets_data.staff_id)
