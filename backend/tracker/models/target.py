"""
Target models: monthly per-service targets, annual Self Assessment targets
and the Self Assessment distribution rules.
"""

from sqlalchemy import Column, Integer, String, Float, JSON, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from tracker.db.base import Base


class MonthlyTarget(Base):
    """Target for one staff member, service and calendar month."""

    __tablename__ = "monthlytargets"
    __table_args__ = (
        UniqueConstraint("staff_id", "service_id", "month", "year", name="uq_monthly_target"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)  # calendar year of the month
    target_value = Column(Integer, nullable=False, default=0)


class AnnualTarget(Base):
    """Annual Self Assessment target for a staff member and financial year."""

    __tablename__ = "sa_annual_targets"
    __table_args__ = (
        UniqueConstraint("staff_id", "year", name="uq_sa_annual_target_staff_year"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    year = Column(Integer, nullable=False)  # financial year start
    annual_target = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class DistributionRule(Base):
    """Share of the annual Self Assessment target assigned to a group of months."""

    __tablename__ = "sa_distribution_rules"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    period_name = Column(String(50), nullable=False)
    months = Column(JSON, nullable=False, default=list)  # calendar month numbers
    percentage = Column(Float, nullable=False, default=0.0)
