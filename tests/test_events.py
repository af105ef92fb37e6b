"""
Event bus and change log tests.
"""

import logging
from datetime import date

import pytest

from tracker.core.change_log import CHANGE_EVENTS, log_change, register_change_log
from tracker.core.events import ACTIVITY_UPDATED, BANK_HOLIDAYS_SYNCED, LEAVE_CHANGED, TARGETS_SAVED, EventBus
from tracker.deps.di_container import build_container


@pytest.mark.asyncio
async def test_publish_reaches_sync_and_async_handlers():
    bus = EventBus()
    received = []

    def on_sync(event):
        received.append(("sync", event.payload["staff_id"]))

    async def on_async(event):
        received.append(("async", event.payload["staff_id"]))

    bus.subscribe(ACTIVITY_UPDATED, on_sync)
    bus.subscribe(ACTIVITY_UPDATED, on_async)

    event = await bus.publish(ACTIVITY_UPDATED, staff_id=7)

    assert event.name == ACTIVITY_UPDATED
    assert received == [("sync", 7), ("async", 7)]


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_delivery():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(LEAVE_CHANGED, broken)
    bus.subscribe(LEAVE_CHANGED, lambda event: received.append(event.name))

    await bus.publish(LEAVE_CHANGED, staff_id=1)

    assert received == [LEAVE_CHANGED]


@pytest.mark.asyncio
async def test_unsubscribe_and_duplicate_subscription():
    bus = EventBus()
    calls = []

    def handler(event):
        calls.append(event)

    bus.subscribe(ACTIVITY_UPDATED, handler)
    bus.subscribe(ACTIVITY_UPDATED, handler)
    assert len(bus.handlers_for(ACTIVITY_UPDATED)) == 1

    bus.unsubscribe(ACTIVITY_UPDATED, handler)
    bus.unsubscribe(ACTIVITY_UPDATED, handler)
    await bus.publish(ACTIVITY_UPDATED)

    assert calls == []


@pytest.mark.asyncio
async def test_activity_change_is_logged_with_staff_and_month(caplog):
    bus = EventBus()
    register_change_log(bus)

    with caplog.at_level(logging.INFO, logger="tracker.core.change_log"):
        await bus.publish(ACTIVITY_UPDATED, staff_id=4, service_id=2, date=date(2025, 6, 16))
        await bus.publish(TARGETS_SAVED, staff_id=5, month=7, year=2025)

    records = [record for record in caplog.records if record.name == "tracker.core.change_log"]
    assert [(record.event, record.staff_id, record.month) for record in records] == [
        (ACTIVITY_UPDATED, 4, "6/2025"),
        (TARGETS_SAVED, 5, "7/2025"),
    ]


@pytest.mark.asyncio
async def test_sync_events_are_not_logged_as_staff_changes(caplog):
    bus = EventBus()
    register_change_log(bus)

    with caplog.at_level(logging.INFO, logger="tracker.core.change_log"):
        await bus.publish(BANK_HOLIDAYS_SYNCED, created=3, updated=0)

    assert not [record for record in caplog.records if record.name == "tracker.core.change_log"]


def test_container_bus_has_change_log_subscribed():
    bus = build_container().event_bus()

    for name in CHANGE_EVENTS:
        assert log_change in bus.handlers_for(name)
