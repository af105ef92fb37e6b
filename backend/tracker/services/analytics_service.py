"""
Analytics service for the dashboard and the team analytics view.

Gathers activity, targets, leave and working days from the repositories and
hands them to the pure functions in tracker.utils.performance_metrics.
"""

import calendar
import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.core.exceptions import InvalidInputError, NotFoundError
from tracker.services.base_service import BaseService
from tracker.services.target_service import TargetService
from tracker.services.working_days_service import WorkingDaysService
from tracker.db.repositories.activity_repository import ActivityRepository
from tracker.db.repositories.leave_repository import LeaveRepository
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.db.repositories.target_repository import MonthlyTargetRepository
from tracker.models.staff import Staff
from tracker.schemas.analytics import (
    BagelMetricsItem,
    LeaveImpactItem,
    MonthPerformanceItem,
    PerformanceSummaryResponse,
    PredictionResponse,
    RunRatePoint,
    RunRateResponse,
    ServiceMixItem,
    StaffAnalyticsItem,
    StaffPerformanceItem,
    StaffPerformanceResponse,
    TeamAnalyticsResponse,
    TeamHealthItem,
)
from tracker.schemas.working_days import WorkingDayQuery
from tracker.utils.financial_year import FinancialYear, month_bounds
from tracker.utils.performance_metrics import (
    MonthPerformance,
    bagel_metrics,
    consistency_score,
    leave_impact,
    leave_months,
    momentum,
    over_delivery_index,
    performance_summary,
    predict_month_end,
    rolling_average,
    run_rate_series,
    service_mix,
    target_accuracy,
    team_health,
)

logger = logging.getLogger(__name__)

SORT_MODES = ("desc", "asc", "name")


class AnalyticsService(BaseService):
    """Service for performance analytics."""

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock
        self.staff_repo = StaffRepository(session)
        self.service_repo = ServiceRepository(session)
        self.activity_repo = ActivityRepository(session)
        self.target_repo = MonthlyTargetRepository(session)
        self.leave_repo = LeaveRepository(session)
        self.target_service = TargetService(session)
        self.working_days_service = WorkingDaysService(session, clock)

    async def _require_staff(self, staff_id: int) -> Staff:
        staff = await self.staff_repo.get(staff_id)
        if staff is None:
            raise NotFoundError("Staff member not found", details={"staff_id": staff_id})
        return staff

    def _is_current_month(self, year: int, month: int) -> bool:
        today = self.clock.today()
        return (year, month) == (today.year, today.month)

    async def _delivered(self, year: int, month: int, staff_id: Optional[int] = None) -> int:
        first_day, last_day = month_bounds(year, month)
        return await self.activity_repo.sum_delivered(staff_id=staff_id, start_date=first_day, end_date=last_day)

    async def _monthly_totals(self, financial_year: FinancialYear, staff_id: Optional[int] = None) -> Dict[Tuple[int, int], int]:
        """Delivered totals per (month, year) within the financial year."""
        fy_start, fy_end = financial_year.date_range()
        activities = await self.activity_repo.list_activities(staff_id=staff_id, start_date=fy_start, end_date=fy_end)
        totals: Dict[Tuple[int, int], int] = defaultdict(int)
        for activity in activities:
            totals[(activity.month, activity.year)] += activity.delivered_count
        return dict(totals)

    async def historical_average(
        self,
        financial_year: FinancialYear,
        month: int,
        staff_id: Optional[int] = None,
    ) -> float:
        """Average monthly delivery over the other months of the financial year that have data."""
        year = financial_year.calendar_year_for(month)
        totals = await self._monthly_totals(financial_year, staff_id)
        others = [total for key, total in totals.items() if key != (month, year) and total > 0]
        return sum(others) / len(others) if others else 0.0

    async def summary(
        self,
        financial_year_start: int,
        month: int,
        staff_id: Optional[int] = None,
    ) -> PerformanceSummaryResponse:
        """Delivered against expected-to-date for a month, for the team or one staff member."""
        if staff_id is not None:
            await self._require_staff(staff_id)
        financial_year = FinancialYear(financial_year_start)
        year = financial_year.calendar_year_for(month)

        delivered = await self._delivered(year, month, staff_id)
        targets = await self.target_service.load_targets(month, financial_year, staff_id)
        working_days = await self.working_days_service.compute(
            WorkingDayQuery(financial_year_start=financial_year_start, month=month, staff_id=staff_id)
        )
        days = working_days.staff_working_days if staff_id is not None else working_days.team_working_days

        result = performance_summary(
            delivered=delivered,
            target=targets.total_target,
            working_days=days,
            working_days_up_to_today=working_days.working_days_up_to_today,
            is_current_month=self._is_current_month(year, month),
        )
        return PerformanceSummaryResponse(
            month=month,
            year=year,
            staff_id=staff_id,
            delivered=result.delivered,
            target=result.target,
            expected=result.expected,
            variance=result.variance,
            status_text=result.status_text,
            working_days=days,
            working_days_up_to_today=working_days.working_days_up_to_today,
            fallback=working_days.fallback,
        )

    async def run_rate(
        self,
        financial_year_start: int,
        month: int,
        staff_id: Optional[int] = None,
    ) -> RunRateResponse:
        """Cumulative expected and actual delivery by calendar day."""
        if staff_id is not None:
            await self._require_staff(staff_id)
        financial_year = FinancialYear(financial_year_start)
        year = financial_year.calendar_year_for(month)
        first_day, last_day = month_bounds(year, month)

        activities = await self.activity_repo.list_activities(staff_id=staff_id, start_date=first_day, end_date=last_day)
        delivered_by_day: Dict[int, int] = defaultdict(int)
        for activity in activities:
            delivered_by_day[activity.date.day] += activity.delivered_count

        targets = await self.target_service.load_targets(month, financial_year, staff_id)
        working_days = await self.working_days_service.compute(
            WorkingDayQuery(financial_year_start=financial_year_start, month=month, staff_id=staff_id)
        )
        days = working_days.staff_working_days if staff_id is not None else working_days.team_working_days
        daily_target = targets.total_target / days if days > 0 else 0.0

        points = run_rate_series(
            year=year,
            month=month,
            target=targets.total_target,
            working_days=days,
            delivered_by_day=delivered_by_day,
            days_in_month=calendar.monthrange(year, month)[1],
        )
        return RunRateResponse(
            month=month,
            year=year,
            staff_id=staff_id,
            target=targets.total_target,
            actual=sum(delivered_by_day.values()),
            daily_target=round(daily_target, 2),
            expected_by_today=round(daily_target * working_days.working_days_up_to_today, 2),
            points=[
                RunRatePoint(
                    day=point.day,
                    expected_cumulative=point.expected_cumulative,
                    actual_cumulative=point.actual_cumulative,
                )
                for point in points
            ],
        )

    async def prediction(self, financial_year_start: int, month: int, staff_id: int) -> PredictionResponse:
        """Projected month-end delivery for one staff member."""
        await self._require_staff(staff_id)
        financial_year = FinancialYear(financial_year_start)
        year = financial_year.calendar_year_for(month)

        delivered = await self._delivered(year, month, staff_id)
        targets = await self.target_service.load_targets(month, financial_year, staff_id)
        average = await self.historical_average(financial_year, month, staff_id)
        working_days = await self.working_days_service.compute(
            WorkingDayQuery(financial_year_start=financial_year_start, month=month, staff_id=staff_id)
        )

        result = predict_month_end(
            delivered=delivered,
            target=targets.total_target,
            working_days=working_days.staff_working_days,
            working_days_up_to_today=working_days.working_days_up_to_today,
            historical_average=average,
        )
        return PredictionResponse(
            staff_id=staff_id,
            month=month,
            year=year,
            delivered=delivered,
            target=targets.total_target,
            historical_average=round(average, 2),
            run_rate=round(result.run_rate, 2),
            projected=result.projected,
            gap=result.gap,
            gap_percentage=round(result.gap_percentage, 1),
            status=result.status,
        )

    async def staff_performance(
        self,
        financial_year_start: int,
        month: int,
        sort: str = "desc",
    ) -> StaffPerformanceResponse:
        """
        Per staff delivery for a month.

        Args:
            financial_year_start: Financial year start year
            month: Calendar month (1-12)
            sort: "desc" or "asc" by total delivered, or "name"

        Returns:
            StaffPerformanceResponse
        """
        if sort not in SORT_MODES:
            raise InvalidInputError(f"Unknown sort mode: {sort}", details={"allowed": list(SORT_MODES)})

        financial_year = FinancialYear(financial_year_start)
        year = financial_year.calendar_year_for(month)
        first_day, last_day = month_bounds(year, month)
        previous_year, previous_month = (year - 1, 12) if month == 1 else (year, month - 1)
        previous_fy = FinancialYear.from_month(previous_month, previous_year)

        services = {service.id: service.service_name for service in await self.service_repo.list_services()}
        staff_members = await self.staff_repo.list_staff()

        items: List[StaffPerformanceItem] = []
        for staff in staff_members:
            activities = await self.activity_repo.list_activities(
                staff_id=staff.id, start_date=first_day, end_date=last_day
            )
            per_service = {name: 0 for name in services.values()}
            for activity in activities:
                name = services.get(activity.service_id)
                if name is not None:
                    per_service[name] += activity.delivered_count
            total = sum(activity.delivered_count for activity in activities)

            targets = await self.target_service.load_targets(month, financial_year, staff.id)
            average = await self.historical_average(financial_year, month, staff.id)

            previous_delivered = await self._delivered(previous_year, previous_month, staff.id)
            previous_targets = await self.target_service.load_targets(previous_month, previous_fy, staff.id)
            previous_ratio = (
                previous_delivered / previous_targets.total_target if previous_targets.total_target > 0 else 0.0
            )

            items.append(
                StaffPerformanceItem(
                    staff_id=staff.id,
                    name=staff.name,
                    services=per_service,
                    total=total,
                    target=targets.total_target,
                    achieved_percent=round(total / targets.total_target * 100, 1) if targets.total_target > 0 else 0.0,
                    historical_average=round(average, 2),
                    previous_month_ratio=round(previous_ratio, 2),
                )
            )

        if sort == "name":
            items.sort(key=lambda item: item.name.lower())
        else:
            items.sort(key=lambda item: (item.total, item.name.lower()), reverse=(sort == "desc"))

        return StaffPerformanceResponse(
            month=month,
            year=year,
            sort=sort,
            team_target=sum(item.target for item in items),
            items=items,
        )

    async def _staff_analytics(
        self,
        staff: Staff,
        financial_year: FinancialYear,
        months: List[Tuple[int, int]],
        end: date,
        services: Dict[int, str],
    ) -> Tuple[StaffAnalyticsItem, List[MonthPerformance], float]:
        fy_start, _ = financial_year.date_range()
        activities = await self.activity_repo.list_activities(staff_id=staff.id, start_date=fy_start, end_date=end)
        targets = await self.target_repo.list_for_months(months, staff_id=staff.id)
        leave = await self.leave_repo.list_overlapping(fy_start, end, staff_id=staff.id)
        leave_ranges = [(max(item.start_date, fy_start), item.end_date) for item in leave]

        delivered: Dict[Tuple[int, int], int] = defaultdict(int)
        delivered_by_service: Dict[str, Dict[Tuple[int, int], int]] = defaultdict(lambda: defaultdict(int))
        for activity in activities:
            key = (activity.month, activity.year)
            delivered[key] += activity.delivered_count
            name = services.get(activity.service_id)
            if name is not None:
                delivered_by_service[name][key] += activity.delivered_count

        targeted: Dict[Tuple[int, int], int] = defaultdict(int)
        for target in targets:
            targeted[(target.month, target.year)] += target.target_value or 0

        performance = [
            MonthPerformance(month=month, year=year, delivered=delivered[(month, year)], target=targeted[(month, year)])
            for month, year in months
        ]

        bagel = bagel_metrics(
            start=fy_start,
            end=end,
            delivery_dates=[activity.date for activity in activities if activity.delivered_count > 0],
            leave_ranges=leave_ranges,
            months_with_data=sum(1 for key in months if delivered[key] > 0),
        )

        mix = service_mix(
            [delivered[key] for key in months],
            {name: [totals[key] for key in months] for name, totals in delivered_by_service.items()},
        )

        percentages = [month.percent_achieved for month in performance]
        impact = leave_impact(performance, leave_months(leave_ranges, end))

        item = StaffAnalyticsItem(
            staff_id=staff.id,
            name=staff.name,
            monthly_performance=[
                MonthPerformanceItem(
                    month=month.month,
                    year=month.year,
                    delivered=month.delivered,
                    target=month.target,
                    percent_achieved=round(month.percent_achieved, 1),
                )
                for month in performance
            ],
            consistency_score=round(consistency_score(performance), 1),
            target_accuracy=round(target_accuracy(performance), 1),
            over_delivery_index=round(over_delivery_index(performance), 1),
            bagel=BagelMetricsItem(
                working_days=bagel.working_days,
                bagel_days=bagel.bagel_days,
                frequency_rate=round(bagel.frequency_rate, 1),
                avg_per_month=round(bagel.avg_per_month, 1),
                longest_streak=bagel.longest_streak,
                clusters=bagel.clusters,
                recovery_speed=round(bagel.recovery_speed, 1),
            ),
            services_mix={
                name: ServiceMixItem(percentages=[round(value, 1) for value in values], trend=direction)
                for name, (values, direction) in mix.items()
            },
            leave_impact=LeaveImpactItem(
                with_leave=round(impact.with_leave, 1),
                without_leave=round(impact.without_leave, 1),
            ),
            rolling_average=[round(value, 1) for value in rolling_average(percentages)],
            momentum=momentum(percentages),
        )
        return item, performance, bagel.frequency_rate

    async def team_analytics(self, financial_year_start: int) -> TeamAnalyticsResponse:
        """
        Financial-year analytics for every visible staff member plus team health.

        Only months that have started are included; the bagel window runs from
        the start of the year to today or the year end, whichever is earlier.
        """
        financial_year = FinancialYear(financial_year_start)
        today = self.clock.today()
        _, fy_end = financial_year.date_range()
        end = min(today, fy_end)
        months = [(month, year) for month, year in financial_year.months() if date(year, month, 1) <= end]

        services = {service.id: service.service_name for service in await self.service_repo.list_services()}
        staff_members = await self.staff_repo.list_staff()

        staff_items: List[StaffAnalyticsItem] = []
        staff_months: List[List[MonthPerformance]] = []
        bagel_rates: List[float] = []
        for staff in staff_members:
            item, performance, bagel_rate = await self._staff_analytics(staff, financial_year, months, end, services)
            staff_items.append(item)
            staff_months.append(performance)
            bagel_rates.append(bagel_rate)

        health = team_health(staff_months, bagel_rates)
        logger.info(f"Built team analytics for {len(staff_items)} staff", extra={"fy": financial_year.label})

        return TeamAnalyticsResponse(
            financial_year_start=financial_year_start,
            label=financial_year.label,
            staff=staff_items,
            team_health=TeamHealthItem(
                avg_target_achieved=round(health.avg_target_achieved, 1),
                team_bagel_rate=round(health.team_bagel_rate, 1),
                performance_bands=health.performance_bands,
            ),
        )
