"""
Self Assessment service tests: allocation, saving and progress.
"""

from datetime import date

import pytest

from tracker.core.config import settings
from tracker.core.events import ANNUAL_TARGET_SAVED, EventBus
from tracker.core.exceptions import InvalidInputError, NotFoundError
from tracker.db.repositories.activity_repository import ActivityRepository
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.db.repositories.target_repository import MonthlyTargetRepository
from tracker.schemas.target import AnnualTargetSave, DistributionRuleCreate
from tracker.services.self_assessment_service import SelfAssessmentService
from tracker.utils.financial_year import FinancialYear


@pytest.fixture
async def sa_service_id(test_db_session):
    service = await ServiceRepository(test_db_session).get_by_name(settings.SELF_ASSESSMENT_SERVICE_NAME)
    return service.id


@pytest.fixture
async def staff_id(test_db_session):
    staff = await StaffRepository(test_db_session).create(name="Alex")
    await test_db_session.commit()
    return staff.id


async def record(session, staff_id, service_id, day, count):
    await ActivityRepository(session).upsert(staff_id, service_id, day, count)
    await session.commit()


@pytest.mark.asyncio
async def test_allocation_from_june_without_deliveries(test_db_session, clock, staff_id):
    service = SelfAssessmentService(test_db_session, clock)

    allocation = await service.calculate_allocation(staff_id, 2025, annual_target=1200)

    assert allocation.current_month == 6
    assert allocation.allocation[4] == allocation.allocation[5] == 0
    assert allocation.allocation[6] == allocation.allocation[7] == 300
    assert [allocation.allocation[month] for month in (8, 9, 10, 11)] == [120, 120, 120, 120]
    assert allocation.total == 1200


@pytest.mark.asyncio
async def test_completed_months_use_deliveries(test_db_session, clock, staff_id, sa_service_id):
    await record(test_db_session, staff_id, sa_service_id, date(2025, 4, 10), 100)
    await record(test_db_session, staff_id, sa_service_id, date(2025, 5, 12), 50)
    # The current month is still open and does not count
    await record(test_db_session, staff_id, sa_service_id, date(2025, 6, 5), 20)
    service = SelfAssessmentService(test_db_session, clock)

    actuals = await service.period_actuals(staff_id, FinancialYear(2025))
    allocation = await service.calculate_allocation(staff_id, 2025, annual_target=1200)

    assert actuals == {"Period 1": 150, "Period 2": 150, "Period 3a": 150, "Period 3b": 150}
    assert allocation.allocation[4] + allocation.allocation[5] == 150
    assert allocation.allocation[6] == allocation.allocation[7] == 225
    assert allocation.total == 1200


@pytest.mark.asyncio
async def test_past_month_overrides_are_dropped(test_db_session, clock, staff_id):
    service = SelfAssessmentService(test_db_session, clock)

    allocation = await service.calculate_allocation(staff_id, 2025, annual_target=1200, overrides={4: 500, 9: 300})

    assert allocation.allocation[4] == 0
    assert allocation.allocation[9] == 300
    assert [allocation.allocation[month] for month in (8, 10, 11)] == [60, 60, 60]
    assert allocation.total == 1200


@pytest.mark.asyncio
async def test_save_annual_target_writes_monthly_targets(test_db_session, clock, staff_id, sa_service_id):
    bus = EventBus()
    published = []
    bus.subscribe(ANNUAL_TARGET_SAVED, lambda event: published.append(event.payload))
    service = SelfAssessmentService(test_db_session, clock, bus)

    saved = await service.save_annual_target(
        staff_id, AnnualTargetSave(financial_year_start=2025, annual_target=1200)
    )

    assert saved.annual_target.annual_target == 1200
    assert saved.allocation.total == 1200
    assert published == [{"staff_id": staff_id, "financial_year_start": 2025, "annual_target": 1200}]

    rows = await MonthlyTargetRepository(test_db_session).list_for_months(
        FinancialYear(2025).months(), staff_id=staff_id, service_id=sa_service_id
    )
    by_month = {(row.month, row.year): row.target_value for row in rows}
    assert len(by_month) == 12
    assert by_month[(6, 2025)] == 300
    assert by_month[(12, 2025)] == 42
    assert by_month[(1, 2026)] == 78
    assert by_month[(2, 2026)] == 0
    assert sum(by_month.values()) == 1200

    # Saving again updates rather than duplicates
    await service.save_annual_target(staff_id, AnnualTargetSave(financial_year_start=2025, annual_target=600))
    stored = await service.get_annual_target(staff_id, 2025)
    rows = await MonthlyTargetRepository(test_db_session).list_for_months(
        FinancialYear(2025).months(), staff_id=staff_id, service_id=sa_service_id
    )
    assert stored.annual_target == 600
    assert len(rows) == 12
    assert sum(row.target_value for row in rows) == 600


@pytest.mark.asyncio
async def test_negative_target_and_unknown_staff(test_db_session, clock, staff_id):
    service = SelfAssessmentService(test_db_session, clock)

    with pytest.raises(InvalidInputError):
        await service.save_annual_target(staff_id, AnnualTargetSave(financial_year_start=2025, annual_target=-1))
    with pytest.raises(NotFoundError):
        await service.calculate_allocation(999, 2025, annual_target=100)


@pytest.mark.asyncio
async def test_stored_target_is_used_for_preview(test_db_session, clock, staff_id):
    service = SelfAssessmentService(test_db_session, clock)
    await service.save_annual_target(staff_id, AnnualTargetSave(financial_year_start=2025, annual_target=800))

    allocation = await service.calculate_allocation(staff_id, 2025)

    assert allocation.annual_target == 800
    assert allocation.total == 800


@pytest.mark.asyncio
async def test_rules_default_and_replacement(test_db_session, clock):
    service = SelfAssessmentService(test_db_session, clock)

    rules = await service.get_rules()
    assert [rule.period_name for rule in rules] == ["Period 1", "Period 2", "Period 3a", "Period 3b", "Period 4"]

    with pytest.raises(InvalidInputError):
        await service.replace_rules([DistributionRuleCreate(period_name="All", months=[4, 5], percentage=100)])

    replaced = await service.replace_rules([
        DistributionRuleCreate(period_name="Spring", months=[4, 5, 6, 7, 8, 9], percentage=60),
        DistributionRuleCreate(period_name="Autumn", months=[10, 11, 12, 1, 2, 3], percentage=40),
    ])
    assert [rule.period_name for rule in replaced] == ["Spring", "Autumn"]
    assert [rule.period_name for rule in await service.get_rules()] == ["Spring", "Autumn"]


@pytest.mark.asyncio
async def test_progress_for_tax_year(test_db_session, clock, staff_id, sa_service_id):
    other = await StaffRepository(test_db_session).create(name="adam")
    await test_db_session.commit()
    await record(test_db_session, staff_id, sa_service_id, date(2025, 4, 10), 100)
    await record(test_db_session, staff_id, sa_service_id, date(2025, 5, 12), 50)
    await record(test_db_session, staff_id, sa_service_id, date(2025, 6, 5), 20)
    await record(test_db_session, other.id, sa_service_id, date(2025, 5, 2), 5)
    service = SelfAssessmentService(test_db_session, clock)
    await service.save_annual_target(staff_id, AnnualTargetSave(financial_year_start=2025, annual_target=1200))

    progress = await service.get_progress(2024)

    assert [item.name for item in progress.items] == ["adam", "Alex"]
    alex = progress.items[1]
    assert alex.submitted == 170
    # 150 delivered before June plus the targets from June to January
    assert alex.full_year_target == 1200
    assert alex.left_to_do == 1030
    adam = progress.items[0]
    assert adam.submitted == 5
    assert adam.full_year_target == 5
    assert adam.left_to_do == 0
    assert progress.total_submitted == 175
