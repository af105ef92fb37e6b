"""
Bank holiday model, one row per (date, region).
"""

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from tracker.db.base import Base


class Region(str, enum.Enum):
    """UK bank holiday divisions as named by the gov.uk feed."""
    ENGLAND_AND_WALES = "england-and-wales"
    SCOTLAND = "scotland"
    NORTHERN_IRELAND = "northern-ireland"


def region_column_type() -> SQLEnum:
    """Enum column type storing the hyphenated region values."""
    return SQLEnum(
        Region,
        name="region",
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class BankHoliday(Base):
    """A public holiday for one region."""

    __tablename__ = "bank_holidays"
    __table_args__ = (
        UniqueConstraint("date", "region", name="uq_bank_holiday_date_region"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    date = Column(Date, nullable=False, index=True)
    region = Column(region_column_type(), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    notes = Column(String(500), nullable=True)
    bunting = Column(Boolean, nullable=False, default=False)
    source = Column(String(50), nullable=False, default="manual")  # "gov.uk" for synced rows
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
