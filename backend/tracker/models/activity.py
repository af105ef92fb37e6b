"""
Daily activity model: items delivered by a staff member for a service on one day.
"""

from sqlalchemy import Column, Integer, Date, ForeignKey, UniqueConstraint

from tracker.db.base import Base


class DailyActivity(Base):
    """Delivered count per staff, service and date."""

    __tablename__ = "dailyactivity"
    __table_args__ = (
        UniqueConstraint("staff_id", "service_id", "date", name="uq_activity_staff_service_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    # Denormalised from date for month/year filtering
    day = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    delivered_count = Column(Integer, nullable=False, default=0)
