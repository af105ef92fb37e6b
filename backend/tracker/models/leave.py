"""
Staff leave model. Ranges are inclusive on both ends and may span months.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tracker.db.base import Base


class StaffLeave(Base):
    """Approved leave for one staff member."""

    __tablename__ = "staff_leave"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_staff_leave_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    type = Column(String(50), nullable=False, default="annual")
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    staff = relationship("Staff", back_populates="leave")
