"""
Bank holiday sync service.

Imports the national bank holiday feed at most once per calendar month. The
time of the last successful import is kept in the sync_markers table.
"""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.core.events import BANK_HOLIDAYS_SYNCED, EventBus
from tracker.core.integrations.bank_holiday_feed import BankHolidayFeedClient
from tracker.services.base_service import BaseService
from tracker.db.repositories.bank_holiday_repository import BankHolidayRepository
from tracker.db.repositories.sync_marker_repository import SyncMarkerRepository
from tracker.schemas.bank_holiday import BankHolidaySyncResponse

logger = logging.getLogger(__name__)

LAST_SYNC_KEY = "bank_holidays_last_sync"
FEED_SOURCE = "gov.uk"


def should_sync(last_synced_at: Optional[datetime], now: datetime) -> bool:
    """True when there was no previous sync or it happened in an earlier calendar month."""
    if last_synced_at is None:
        return True
    return (now.year, now.month) > (last_synced_at.year, last_synced_at.month)


class BankHolidaySyncService(BaseService):
    """Service that refreshes bank holidays from the feed."""

    def __init__(
        self,
        session: AsyncSession,
        feed: BankHolidayFeedClient,
        clock: Clock,
        event_bus: Optional[EventBus] = None,
    ):
        self.session = session
        self.feed = feed
        self.clock = clock
        self.event_bus = event_bus
        self.holiday_repo = BankHolidayRepository(session)
        self.marker_repo = SyncMarkerRepository(session)

    async def sync(self, force: bool = False) -> BankHolidaySyncResponse:
        """
        Import the feed when due.

        Args:
            force: Import even if a sync already ran this month

        Returns:
            BankHolidaySyncResponse with created/updated counts
        """
        now = self.clock.now()
        last_synced_at = await self.marker_repo.get_last_synced(LAST_SYNC_KEY)

        if not force and not should_sync(last_synced_at, now):
            logger.info("Bank holidays already synced this month", extra={"last_synced_at": str(last_synced_at)})
            return BankHolidaySyncResponse(
                synced=False,
                last_synced_at=last_synced_at,
                message="Bank holidays already synced this month",
            )

        holidays = await self.feed.fetch()

        created = 0
        updated = 0
        for holiday in holidays:
            _, was_created = await self.holiday_repo.upsert(
                day=holiday.date,
                region=holiday.region,
                title=holiday.title,
                notes=holiday.notes,
                bunting=holiday.bunting,
                source=FEED_SOURCE,
            )
            if was_created:
                created += 1
            else:
                updated += 1

        await self.marker_repo.mark_synced(LAST_SYNC_KEY, now)
        await self.session.commit()

        logger.info(
            f"Bank holiday sync complete: {created} created, {updated} updated",
            extra={"events": len(holidays)},
        )
        await self.publish(BANK_HOLIDAYS_SYNCED, created=created, updated=updated)

        return BankHolidaySyncResponse(
            synced=True,
            created=created,
            updated=updated,
            last_synced_at=now,
            message=f"Synced {len(holidays)} bank holidays",
        )
