"""
Sync marker repository for database operations.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.sync_marker import SyncMarker


class SyncMarkerRepository(BaseRepository[SyncMarker]):
    """Repository for sync markers."""

    def __init__(self, session: AsyncSession):
        super().__init__(SyncMarker, session)

    async def get_last_synced(self, key: str) -> Optional[datetime]:
        result = await self.session.execute(
            select(SyncMarker.synced_at).where(SyncMarker.key == key)
        )
        return result.scalar_one_or_none()

    async def mark_synced(self, key: str, synced_at: datetime) -> SyncMarker:
        """Record a completed sync for key."""
        result = await self.session.execute(select(SyncMarker).where(SyncMarker.key == key))
        marker = result.scalar_one_or_none()
        if marker is None:
            return await self.create(key=key, synced_at=synced_at)
        marker.synced_at = synced_at
        await self.session.flush()
        return marker
