"""
Staff model.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tracker.db.base import Base
from tracker.models.bank_holiday import region_column_type


class Staff(Base):
    """A team member whose activity and targets are tracked."""

    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="staff")
    home_region = Column(region_column_type(), nullable=True)  # None means the default region
    is_hidden = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    leave = relationship("StaffLeave", back_populates="staff", cascade="all, delete-orphan")
