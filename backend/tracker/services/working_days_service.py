"""
Working days service.

Looks up the region, bank holidays and leave for a month and hands them to
the pure calculator. Lookups share one AsyncSession, so they run one after
another. If the store fails, the service falls back to plain weekday counts
and sets the result's fallback flag instead of raising.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.core.config import settings
from tracker.core.exceptions import NotFoundError
from tracker.services.base_service import BaseService
from tracker.db.repositories.bank_holiday_repository import BankHolidayRepository
from tracker.db.repositories.leave_repository import LeaveRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.models.bank_holiday import Region
from tracker.schemas.working_days import WorkingDayQuery, WorkingDaysResult
from tracker.utils.financial_year import FinancialYear, month_bounds
from tracker.utils.working_days import DateRange, WorkingDayCounts, calculate_working_days

logger = logging.getLogger(__name__)


def default_region() -> Region:
    return Region(settings.DEFAULT_REGION)


class WorkingDaysService(BaseService):
    """Service computing working days for the team or a staff member."""

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock
        self.staff_repo = StaffRepository(session)
        self.holiday_repo = BankHolidayRepository(session)
        self.leave_repo = LeaveRepository(session)

    async def _lookup(
        self,
        year: int,
        month: int,
        staff_id: Optional[int],
    ) -> Tuple[Region, List, Optional[List[DateRange]]]:
        first_day, last_day = month_bounds(year, month)
        region = default_region()
        leave_ranges: Optional[List[DateRange]] = None

        if staff_id is not None:
            staff = await self.staff_repo.get(staff_id)
            if staff is None:
                raise NotFoundError("Staff member not found", details={"staff_id": staff_id})
            # Staff without a home region use the team default
            region = Region(staff.home_region) if staff.home_region else default_region()

        holidays = await self.holiday_repo.list_dates(region, first_day, last_day)

        if staff_id is not None:
            leave = await self.leave_repo.list_overlapping(first_day, last_day, staff_id=staff_id)
            leave_ranges = [(item.start_date, item.end_date) for item in leave]

        return region, holidays, leave_ranges

    async def calculate(self, query: WorkingDayQuery) -> Tuple[WorkingDayCounts, Region, bool]:
        """
        Working day counts for the query with the region used and the fallback flag.
        """
        financial_year = FinancialYear(query.financial_year_start)
        year = financial_year.calendar_year_for(query.month)
        today = self.clock.today()

        try:
            region, holidays, leave_ranges = await self._lookup(year, query.month, query.staff_id)
        except SQLAlchemyError as e:
            logger.warning(
                f"Working day lookups failed, using weekday counts: {e}",
                extra={"year": year, "month": query.month, "staff_id": query.staff_id},
            )
            await self.session.rollback()
            counts = calculate_working_days(year, query.month, today)
            return counts, default_region(), True

        counts = calculate_working_days(year, query.month, today, holidays=holidays, leave_ranges=leave_ranges)
        return counts, region, False

    async def compute(self, query: WorkingDayQuery) -> WorkingDaysResult:
        """
        Working days in a financial-year month and how many have elapsed.

        For a staff query the elapsed count is net of their leave; for the team
        it is net of bank holidays only and staff_working_days equals
        team_working_days.
        """
        counts, region, fallback = await self.calculate(query)
        individual = query.staff_id is not None

        return WorkingDaysResult(
            year=counts.year,
            month=counts.month,
            region=region,
            team_working_days=counts.team_working_days,
            staff_working_days=counts.staff_working_days,
            working_days_up_to_today=(
                counts.staff_working_days_to_today if individual else counts.team_working_days_to_today
            ),
            fallback=fallback,
        )
