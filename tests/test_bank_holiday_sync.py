"""
Bank holiday feed parsing and sync tests.
"""

from datetime import date, datetime, timezone

import pytest

from tracker.core.clock import FixedClock
from tracker.core.events import BANK_HOLIDAYS_SYNCED, EventBus
from tracker.core.exceptions import ExternalServiceError
from tracker.core.integrations.bank_holiday_feed import FeedHoliday, parse_feed
from tracker.db.repositories.bank_holiday_repository import BankHolidayRepository
from tracker.models.bank_holiday import Region
from tracker.services.bank_holiday_sync_service import BankHolidaySyncService, should_sync

FEED = {
    "england-and-wales": {
        "division": "england-and-wales",
        "events": [
            {"title": "Christmas Day", "date": "2025-12-25", "notes": "", "bunting": True},
            {"title": "Boxing Day", "date": "2025-12-26", "notes": "", "bunting": True},
        ],
    },
    "scotland": {
        "division": "scotland",
        "events": [
            {"title": "St Andrew's Day", "date": "2025-12-01", "notes": "Substitute day", "bunting": True},
        ],
    },
    "northern-ireland": {"division": "northern-ireland", "events": []},
}


def test_parse_feed():
    holidays = parse_feed(FEED)

    assert len(holidays) == 3
    assert FeedHoliday(date(2025, 12, 1), Region.SCOTLAND, "St Andrew's Day", "Substitute day", True) in holidays
    assert {holiday.region for holiday in holidays} == {Region.ENGLAND_AND_WALES, Region.SCOTLAND}


def test_parse_feed_rejects_malformed_events():
    with pytest.raises(ExternalServiceError):
        parse_feed({"scotland": {"events": [{"title": "No date"}]}})


def test_should_sync_once_per_calendar_month():
    now = datetime(2025, 6, 16, tzinfo=timezone.utc)

    assert should_sync(None, now)
    assert should_sync(datetime(2025, 5, 31, 23, 0), now)
    assert not should_sync(datetime(2025, 6, 1, 0, 5), now)


@pytest.mark.asyncio
async def test_sync_imports_feed_and_marks_month(test_db_session, clock, feed_class):
    feed = feed_class(parse_feed(FEED))
    bus = EventBus()
    published = []
    bus.subscribe(BANK_HOLIDAYS_SYNCED, lambda event: published.append(event.payload))
    service = BankHolidaySyncService(test_db_session, feed, clock, bus)

    first = await service.sync()

    assert first.synced is True
    assert first.created == 3
    assert first.updated == 0
    assert published == [{"created": 3, "updated": 0}]

    stored = await BankHolidayRepository(test_db_session).list_holidays(region=Region.ENGLAND_AND_WALES)
    assert [holiday.date for holiday in stored] == [date(2025, 12, 25), date(2025, 12, 26)]
    assert all(holiday.source == "gov.uk" for holiday in stored)

    second = await service.sync()

    assert second.synced is False
    assert feed.calls == 1


@pytest.mark.asyncio
async def test_forced_sync_updates_existing_rows(test_db_session, clock, feed_class):
    feed = feed_class(parse_feed(FEED))
    service = BankHolidaySyncService(test_db_session, feed, clock)
    await service.sync()

    result = await service.sync(force=True)

    assert result.synced is True
    assert result.created == 0
    assert result.updated == 3
    assert feed.calls == 2


@pytest.mark.asyncio
async def test_sync_runs_again_in_a_new_month(test_db_session, feed_class):
    feed = feed_class(parse_feed(FEED))
    await BankHolidaySyncService(test_db_session, feed, FixedClock(date(2025, 6, 30))).sync()

    result = await BankHolidaySyncService(test_db_session, feed, FixedClock(date(2025, 7, 1))).sync()

    assert result.synced is True
    assert feed.calls == 2


@pytest.mark.asyncio
async def test_feed_failure_is_raised(test_db_session, clock, feed_class):
    feed = feed_class(error=ExternalServiceError("Bank holiday feed unavailable"))
    service = BankHolidaySyncService(test_db_session, feed, clock)

    with pytest.raises(ExternalServiceError):
        await service.sync()
