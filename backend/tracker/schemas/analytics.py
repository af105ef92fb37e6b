"""
Analytics Pydantic schemas for dashboard and team views.
"""

from pydantic import BaseModel
from typing import Dict, List, Optional


class PerformanceSummaryResponse(BaseModel):
    """Delivery against expected-to-date for a month."""
    month: int
    year: int
    staff_id: Optional[int] = None
    delivered: int
    target: int
    expected: int
    variance: int
    status_text: str
    working_days: int
    working_days_up_to_today: int
    fallback: bool = False


class RunRatePoint(BaseModel):
    day: int
    expected_cumulative: float
    actual_cumulative: int


class RunRateResponse(BaseModel):
    """Cumulative expected and actual delivery by day."""
    month: int
    year: int
    staff_id: Optional[int] = None
    target: int
    actual: int
    daily_target: float
    expected_by_today: float
    points: List[RunRatePoint]


class PredictionResponse(BaseModel):
    """Projected month-end delivery for one staff member."""
    staff_id: int
    month: int
    year: int
    delivered: int
    target: int
    historical_average: float
    run_rate: float
    projected: int
    gap: int
    gap_percentage: float
    status: str


class StaffPerformanceItem(BaseModel):
    """One staff member's delivery for a month."""
    staff_id: int
    name: str
    services: Dict[str, int]
    total: int
    target: int
    achieved_percent: float
    historical_average: float
    previous_month_ratio: float


class StaffPerformanceResponse(BaseModel):
    month: int
    year: int
    sort: str
    team_target: int
    items: List[StaffPerformanceItem]


class MonthPerformanceItem(BaseModel):
    month: int
    year: int
    delivered: int
    target: int
    percent_achieved: float


class ServiceMixItem(BaseModel):
    percentages: List[float]
    trend: str


class LeaveImpactItem(BaseModel):
    with_leave: float
    without_leave: float


class BagelMetricsItem(BaseModel):
    working_days: int
    bagel_days: int
    frequency_rate: float
    avg_per_month: float
    longest_streak: int
    clusters: int
    recovery_speed: float


class StaffAnalyticsItem(BaseModel):
    """Financial-year analytics for one staff member."""
    staff_id: int
    name: str
    monthly_performance: List[MonthPerformanceItem]
    consistency_score: float
    target_accuracy: float
    over_delivery_index: float
    bagel: BagelMetricsItem
    services_mix: Dict[str, ServiceMixItem]
    leave_impact: LeaveImpactItem
    rolling_average: List[float]
    momentum: str


class TeamHealthItem(BaseModel):
    avg_target_achieved: float
    team_bagel_rate: float
    performance_bands: Dict[str, int]


class TeamAnalyticsResponse(BaseModel):
    """Financial-year analytics for the whole team."""
    financial_year_start: int
    label: str
    staff: List[StaffAnalyticsItem]
    team_health: TeamHealthItem
