"""
Self Assessment target service.

Owns the annual Self Assessment target for each staff member, turns it into
monthly targets with the checkpoint redistribution and stores the result as
monthly target rows against the Self Assessments service.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.core.config import settings
from tracker.core.events import ANNUAL_TARGET_SAVED, EventBus
from tracker.core.exceptions import InvalidInputError, NotFoundError
from tracker.services.base_service import BaseService
from tracker.db.repositories.activity_repository import ActivityRepository
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.db.repositories.target_repository import (
    AnnualTargetRepository,
    DistributionRuleRepository,
    MonthlyTargetRepository,
)
from tracker.models.service import Service
from tracker.schemas.target import (
    AllocationResponse,
    AnnualTargetResponse,
    AnnualTargetSave,
    AnnualTargetSaveResponse,
    DistributionRuleCreate,
    DistributionRuleResponse,
    SelfAssessmentProgressItem,
    SelfAssessmentProgressResponse,
)
from tracker.utils.financial_year import FinancialYear, month_bounds
from tracker.utils.sa_redistribution import (
    DEFAULT_DISTRIBUTION_RULES,
    SA_CHECKPOINTS,
    calculate_all_months,
    current_month_for,
    is_current_or_future_month,
    validate_distribution_rules,
)

logger = logging.getLogger(__name__)


class SelfAssessmentService(BaseService):
    """Service for annual Self Assessment targets and their monthly allocation."""

    def __init__(self, session: AsyncSession, clock: Clock, event_bus: Optional[EventBus] = None):
        self.session = session
        self.clock = clock
        self.event_bus = event_bus
        self.staff_repo = StaffRepository(session)
        self.service_repo = ServiceRepository(session)
        self.activity_repo = ActivityRepository(session)
        self.annual_repo = AnnualTargetRepository(session)
        self.monthly_repo = MonthlyTargetRepository(session)
        self.rule_repo = DistributionRuleRepository(session)

    async def get_sa_service(self) -> Service:
        service = await self.service_repo.get_by_name(settings.SELF_ASSESSMENT_SERVICE_NAME)
        if service is None:
            raise NotFoundError(
                "Self Assessment service not found",
                details={"service_name": settings.SELF_ASSESSMENT_SERVICE_NAME},
            )
        return service

    async def _require_staff(self, staff_id: int) -> None:
        if await self.staff_repo.get(staff_id) is None:
            raise NotFoundError("Staff member not found", details={"staff_id": staff_id})

    async def get_rules(self) -> List[DistributionRuleResponse]:
        """Stored distribution rules, or the defaults when none are stored."""
        rules = await self.rule_repo.list_rules()
        if rules:
            return [DistributionRuleResponse.model_validate(rule) for rule in rules]
        return [
            DistributionRuleResponse(
                id=index,
                period_name=rule.period_name,
                months=list(rule.months),
                percentage=rule.percentage,
            )
            for index, rule in enumerate(DEFAULT_DISTRIBUTION_RULES, start=1)
        ]

    async def replace_rules(self, rules: List[DistributionRuleCreate]) -> List[DistributionRuleResponse]:
        """Replace the rule set after checking it covers every month once and sums to 100%."""
        problems = validate_distribution_rules(rules)
        if problems:
            raise InvalidInputError("Invalid distribution rules", details=problems)

        stored = await self.rule_repo.replace_all(rule.model_dump() for rule in rules)
        await self.session.commit()
        logger.info(f"Replaced distribution rules with {len(stored)} periods")
        return [DistributionRuleResponse.model_validate(rule) for rule in stored]

    async def get_annual_target(self, staff_id: int, financial_year_start: int) -> Optional[AnnualTargetResponse]:
        target = await self.annual_repo.get_for_staff(staff_id, financial_year_start)
        if not target:
            return None
        return AnnualTargetResponse.model_validate(target)

    async def period_actuals(self, staff_id: int, financial_year: FinancialYear) -> Dict[str, int]:
        """
        Cumulative Self Assessment deliveries from the start of the financial
        year through each checkpoint boundary.

        Only completed calendar months count; deliveries in the current month
        are still open and belong to its target.
        """
        service = await self.get_sa_service()
        today = self.clock.today()
        fy_start, fy_end = financial_year.date_range()
        cutoff = min(today.replace(day=1) - timedelta(days=1), fy_end)
        if cutoff < fy_start:
            return {}

        activities = await self.activity_repo.list_activities(
            staff_id=staff_id,
            service_id=service.id,
            start_date=fy_start,
            end_date=cutoff,
        )

        actuals: Dict[str, int] = {}
        for checkpoint in SA_CHECKPOINTS:
            boundary = min(checkpoint.boundary(financial_year), cutoff)
            actuals[checkpoint.name] = sum(
                activity.delivered_count for activity in activities if activity.date <= boundary
            )
        return actuals

    def _open_overrides(self, overrides: Mapping[int, int], financial_year: FinancialYear) -> Dict[int, int]:
        """Overrides for months that have not passed; the rest are dropped."""
        today = self.clock.today()
        kept: Dict[int, int] = {}
        for month, value in overrides.items():
            if not 1 <= month <= 12:
                continue
            if is_current_or_future_month(month, financial_year, today):
                kept[month] = value
            else:
                logger.info(f"Ignoring override for past month {month}", extra={"fy": financial_year.label})
        return kept

    async def calculate_allocation(
        self,
        staff_id: int,
        financial_year_start: int,
        annual_target: Optional[int] = None,
        overrides: Optional[Mapping[int, int]] = None,
    ) -> AllocationResponse:
        """
        Twelve-month allocation for a staff member.

        Args:
            staff_id: Staff member
            financial_year_start: Financial year start year
            annual_target: Target to allocate; the stored one when None
            overrides: Manually fixed values for current or future months

        Returns:
            AllocationResponse
        """
        await self._require_staff(staff_id)
        financial_year = FinancialYear(financial_year_start)

        if annual_target is None:
            stored = await self.annual_repo.get_for_staff(staff_id, financial_year_start)
            annual_target = stored.annual_target if stored else 0
        if annual_target < 0:
            raise InvalidInputError("Annual target cannot be negative")

        rules = await self.get_rules()
        actuals = await self.period_actuals(staff_id, financial_year)
        current_month = current_month_for(financial_year, self.clock.today())

        allocation = calculate_all_months(
            annual_target=annual_target,
            actuals_by_period=actuals,
            current_month=current_month,
            overrides=self._open_overrides(overrides or {}, financial_year),
            distribution_rules=rules,
        )

        return AllocationResponse(
            staff_id=staff_id,
            financial_year_start=financial_year_start,
            annual_target=annual_target,
            current_month=current_month,
            actuals_by_period=actuals,
            allocation=allocation,
            total=sum(allocation.values()),
        )

    async def save_annual_target(self, staff_id: int, target_data: AnnualTargetSave) -> AnnualTargetSaveResponse:
        """Store the annual target, recalculate the twelve months and store them as monthly targets."""
        if target_data.annual_target < 0:
            raise InvalidInputError("Annual target cannot be negative")
        await self._require_staff(staff_id)
        service = await self.get_sa_service()

        allocation = await self.calculate_allocation(
            staff_id,
            target_data.financial_year_start,
            annual_target=target_data.annual_target,
            overrides=target_data.overrides,
        )

        annual = await self.annual_repo.upsert(staff_id, target_data.financial_year_start, target_data.annual_target)
        financial_year = FinancialYear(target_data.financial_year_start)
        for month, value in allocation.allocation.items():
            await self.monthly_repo.upsert(
                staff_id=staff_id,
                service_id=service.id,
                month=month,
                year=financial_year.calendar_year_for(month),
                target_value=value,
            )
        await self.session.commit()
        await self.session.refresh(annual)

        logger.info(
            f"Saved annual Self Assessment target {target_data.annual_target} for staff {staff_id}",
            extra={"fy": financial_year.label},
        )
        await self.publish(
            ANNUAL_TARGET_SAVED,
            staff_id=staff_id,
            financial_year_start=target_data.financial_year_start,
            annual_target=target_data.annual_target,
        )
        return AnnualTargetSaveResponse(
            annual_target=AnnualTargetResponse.model_validate(annual),
            allocation=allocation,
        )

    async def get_progress(self, financial_year_start: int) -> SelfAssessmentProgressResponse:
        """
        Self Assessment returns progress for a tax year.

        Returns for the tax year starting in April of `financial_year_start`
        are delivered from 1 April of the following year to 31 January the
        year after. The full-year target is what was delivered up to the last
        completed month plus the targets of the current and later months.
        """
        service = await self.get_sa_service()
        today = self.clock.today()
        tax_year = FinancialYear(financial_year_start)
        delivery_start = date(tax_year.end, 4, 1)
        delivery_end = date(tax_year.end + 1, 1, 31)

        last_completed: Optional[date] = None
        if today > delivery_start:
            end_of_previous_month = today.replace(day=1) - timedelta(days=1)
            if end_of_previous_month >= delivery_start:
                last_completed = min(end_of_previous_month, delivery_end)

        activities = await self.activity_repo.list_activities(
            service_id=service.id,
            start_date=delivery_start,
            end_date=delivery_end,
        )
        delivery_year = FinancialYear(tax_year.end)
        window_months = [
            (month, year) for month, year in delivery_year.months()
            if delivery_start <= month_bounds(year, month)[0] <= delivery_end
        ]
        targets = await self.monthly_repo.list_for_months(window_months, service_id=service.id)

        first_open_month = today.replace(day=1)
        staff_by_id = await self.staff_repo.get_many(
            [activity.staff_id for activity in activities] + [target.staff_id for target in targets]
        )
        items: List[SelfAssessmentProgressItem] = []
        for staff_id, staff in staff_by_id.items():
            staff_activities = [activity for activity in activities if activity.staff_id == staff_id]
            submitted = sum(activity.delivered_count for activity in staff_activities)
            actuals_to_last_month = 0
            if last_completed is not None:
                actuals_to_last_month = sum(
                    activity.delivered_count for activity in staff_activities if activity.date <= last_completed
                )
            future_targets = sum(
                target.target_value for target in targets
                if target.staff_id == staff_id and date(target.year, target.month, 1) >= first_open_month
            )
            full_year_target = actuals_to_last_month + future_targets
            items.append(
                SelfAssessmentProgressItem(
                    staff_id=staff_id,
                    name=staff.name,
                    submitted=submitted,
                    full_year_target=full_year_target,
                    left_to_do=max(0, full_year_target - submitted),
                )
            )

        items.sort(key=lambda item: item.name.lower())
        return SelfAssessmentProgressResponse(
            financial_year_start=financial_year_start,
            items=items,
            total_submitted=sum(item.submitted for item in items),
            total_target=sum(item.full_year_target for item in items),
            total_left_to_do=sum(item.left_to_do for item in items),
        )
