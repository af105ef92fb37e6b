"""
Client for the gov.uk bank holiday feed.

The feed is a JSON object keyed by division:

    {"england-and-wales": {"division": "england-and-wales",
                           "events": [{"title": "...", "date": "2025-12-25",
                                       "notes": "", "bunting": true}, ...]},
     "scotland": {...}, "northern-ireland": {...}}
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List

import aiohttp

from tracker.core.exceptions import ExternalServiceError
from tracker.core.integrations.http.http_client import HttpClient
from tracker.models.bank_holiday import Region

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedHoliday:
    """One bank holiday event for one region."""
    date: date
    region: Region
    title: str
    notes: str = ""
    bunting: bool = False


def parse_feed(data: Dict[str, Any]) -> List[FeedHoliday]:
    """
    Flatten the feed into one FeedHoliday per (region, event).

    Unknown divisions are skipped. Raises ExternalServiceError when the payload
    does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ExternalServiceError("Bank holiday feed returned an unexpected payload")

    holidays: List[FeedHoliday] = []
    for region in Region:
        block = data.get(region.value)
        if block is None:
            logger.warning(f"Bank holiday feed has no events for {region.value}")
            continue
        try:
            for event in block.get("events", []):
                holidays.append(
                    FeedHoliday(
                        date=date.fromisoformat(event["date"]),
                        region=region,
                        title=event["title"],
                        notes=event.get("notes") or "",
                        bunting=bool(event.get("bunting", False)),
                    )
                )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ExternalServiceError(
                "Bank holiday feed is malformed",
                details={"region": region.value, "error": str(e)},
            ) from e
    return holidays


class BankHolidayFeedClient:
    """Fetches and parses the national bank holiday feed."""

    def __init__(self, http_client: HttpClient, url: str):
        self.http_client = http_client
        self.url = url

    async def fetch(self) -> List[FeedHoliday]:
        """Download the feed and return its events for every known region."""
        try:
            data = await self.http_client.get_json(self.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExternalServiceError(
                "Bank holiday feed unavailable",
                details={"url": self.url, "error": str(e)},
            ) from e
        holidays = parse_feed(data)
        logger.info(f"Fetched {len(holidays)} bank holiday events", extra={"url": self.url})
        return holidays
