"""
Working days service tests against the in-memory database.
"""

from datetime import date

import pytest
from sqlalchemy.exc import SQLAlchemyError

from tracker.core.clock import FixedClock
from tracker.core.exceptions import NotFoundError
from tracker.db.repositories.bank_holiday_repository import BankHolidayRepository
from tracker.db.repositories.leave_repository import LeaveRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.models.bank_holiday import Region
from tracker.schemas.working_days import WorkingDayQuery
from tracker.services.working_days_service import WorkingDaysService

EARLY_MAY = date(2025, 5, 5)
SPRING = date(2025, 5, 26)


@pytest.fixture
async def may_holidays(test_db_session):
    repo = BankHolidayRepository(test_db_session)
    await repo.upsert(EARLY_MAY, Region.ENGLAND_AND_WALES, "Early May bank holiday")
    await repo.upsert(SPRING, Region.ENGLAND_AND_WALES, "Spring bank holiday")
    await repo.upsert(EARLY_MAY, Region.SCOTLAND, "Early May bank holiday")
    await test_db_session.commit()


@pytest.mark.asyncio
async def test_team_working_days_net_of_holidays(test_db_session, clock, may_holidays):
    service = WorkingDaysService(test_db_session, clock)

    result = await service.compute(WorkingDayQuery(financial_year_start=2025, month=5))

    assert result.year == 2025
    assert result.region == Region.ENGLAND_AND_WALES
    assert result.team_working_days == 20
    assert result.staff_working_days == 20
    # May is complete by mid June
    assert result.working_days_up_to_today == 20
    assert result.fallback is False


@pytest.mark.asyncio
async def test_staff_working_days_net_of_leave(test_db_session, clock, may_holidays):
    staff = await StaffRepository(test_db_session).create(name="Alex")
    await LeaveRepository(test_db_session).create(
        staff_id=staff.id, start_date=date(2025, 5, 12), end_date=date(2025, 5, 16)
    )
    await test_db_session.commit()
    service = WorkingDaysService(test_db_session, clock)

    result = await service.compute(WorkingDayQuery(financial_year_start=2025, month=5, staff_id=staff.id))

    assert result.team_working_days == 20
    assert result.staff_working_days == 15
    assert result.working_days_up_to_today == 15


@pytest.mark.asyncio
async def test_staff_home_region_selects_holidays(test_db_session, clock, may_holidays):
    staff = await StaffRepository(test_db_session).create(name="Morgan", home_region=Region.SCOTLAND)
    await test_db_session.commit()
    service = WorkingDaysService(test_db_session, clock)

    result = await service.compute(WorkingDayQuery(financial_year_start=2025, month=5, staff_id=staff.id))

    assert result.region == Region.SCOTLAND
    assert result.team_working_days == 21


@pytest.mark.asyncio
async def test_current_month_elapsed(test_db_session, clock):
    service = WorkingDaysService(test_db_session, clock)

    result = await service.compute(WorkingDayQuery(financial_year_start=2025, month=6))

    assert result.team_working_days == 21
    assert result.working_days_up_to_today == 11


@pytest.mark.asyncio
async def test_unknown_staff_is_not_found(test_db_session, clock):
    service = WorkingDaysService(test_db_session, clock)

    with pytest.raises(NotFoundError):
        await service.compute(WorkingDayQuery(financial_year_start=2025, month=5, staff_id=999))


@pytest.mark.asyncio
async def test_store_failure_falls_back_to_weekdays(test_db_session, may_holidays):
    service = WorkingDaysService(test_db_session, FixedClock(date(2025, 5, 9)))

    async def broken_list_dates(*args, **kwargs):
        raise SQLAlchemyError("database is unavailable")

    service.holiday_repo.list_dates = broken_list_dates

    result = await service.compute(WorkingDayQuery(financial_year_start=2025, month=5))

    assert result.fallback is True
    assert result.region == Region.ENGLAND_AND_WALES
    # Weekdays only: the stored holidays could not be read
    assert result.team_working_days == 22
    assert result.working_days_up_to_today == 7


@pytest.mark.asyncio
async def test_leave_lookup_failure_falls_back_to_team_weekdays(test_db_session, may_holidays):
    staff = await StaffRepository(test_db_session).create(name="Alex")
    await LeaveRepository(test_db_session).create(
        staff_id=staff.id, start_date=date(2025, 5, 12), end_date=date(2025, 5, 16)
    )
    await test_db_session.commit()
    service = WorkingDaysService(test_db_session, FixedClock(date(2025, 5, 9)))

    async def broken_list_overlapping(*args, **kwargs):
        raise SQLAlchemyError("database is unavailable")

    service.leave_repo.list_overlapping = broken_list_overlapping

    result = await service.compute(WorkingDayQuery(financial_year_start=2025, month=5, staff_id=staff.id))

    assert result.fallback is True
    assert result.region == Region.ENGLAND_AND_WALES
    assert result.team_working_days == 22
    assert result.staff_working_days == result.team_working_days
    assert result.working_days_up_to_today == 7
