"""
Sync marker model: last successful run of a named background sync.
"""

from sqlalchemy import Column, Integer, String, DateTime

from tracker.db.base import Base


class SyncMarker(Base):
    """Timestamp of the last completed sync for a key."""

    __tablename__ = "sync_markers"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    key = Column(String(100), nullable=False, unique=True)
    synced_at = Column(DateTime(timezone=True), nullable=False)
