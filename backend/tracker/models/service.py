"""
Service model (a kind of work delivered, e.g. Accounts, VAT, Self Assessments).
"""

from sqlalchemy import Column, Integer, String

from tracker.db.base import Base


class Service(Base):
    """A deliverable service line."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    service_name = Column(String(100), nullable=False, unique=True)
