"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from tracker.models.bank_holiday import BankHoliday, Region
from tracker.models.staff import Staff
from tracker.models.service import Service
from tracker.models.activity import DailyActivity
from tracker.models.target import MonthlyTarget, AnnualTarget, DistributionRule
from tracker.models.leave import StaffLeave
from tracker.models.sync_marker import SyncMarker

__all__ = [
    "BankHoliday",
    "Region",
    "Staff",
    "Service",
    "DailyActivity",
    "MonthlyTarget",
    "AnnualTarget",
    "DistributionRule",
    "StaffLeave",
    "SyncMarker",
]
