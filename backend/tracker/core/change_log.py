"""
Change log subscriber.

Writes one line per mutation naming the staff member and the month whose
figures it touched.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from tracker.core.events import (
    ACTIVITY_UPDATED,
    ANNUAL_TARGET_SAVED,
    LEAVE_CHANGED,
    TARGETS_SAVED,
    DomainEvent,
    EventBus,
)

logger = logging.getLogger(__name__)

CHANGE_EVENTS = (ACTIVITY_UPDATED, TARGETS_SAVED, ANNUAL_TARGET_SAVED, LEAVE_CHANGED)


def _affected_month(payload: Mapping[str, Any]) -> Optional[str]:
    day = payload.get("date")
    if day is not None:
        return f"{day.month}/{day.year}"
    if payload.get("month") is not None and payload.get("year") is not None:
        return f"{payload['month']}/{payload['year']}"
    return None


def log_change(event: DomainEvent) -> None:
    """Log the staff member and month affected by a change event."""
    context: Dict[str, Any] = {"event": event.name}
    if event.payload.get("staff_id") is not None:
        context["staff_id"] = event.payload["staff_id"]
    month = _affected_month(event.payload)
    if month:
        context["month"] = month
    if event.payload.get("financial_year_start") is not None:
        context["fy_start"] = event.payload["financial_year_start"]

    logger.info(f"Figures changed by {event.name}", extra=context)


def register_change_log(bus: EventBus) -> None:
    for name in CHANGE_EVENTS:
        bus.subscribe(name, log_change)
