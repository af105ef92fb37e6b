"""
HTTP client and bank holiday feed client tests against a local aiohttp server.
"""

from datetime import date

import aiohttp
import pytest
from aiohttp import test_utils, web

from tracker.core.exceptions import ExternalServiceError
from tracker.core.integrations.bank_holiday_feed import BankHolidayFeedClient
from tracker.core.integrations.http.http_client import HttpClient
from tracker.models.bank_holiday import Region

FEED = {
    "england-and-wales": {
        "division": "england-and-wales",
        "events": [{"title": "Christmas Day", "date": "2025-12-25", "notes": "", "bunting": True}],
    },
}


@pytest.fixture
async def feed_server():
    """Serves FEED after `failures` responses with `status`."""
    state = {"calls": 0, "failures": 0, "status": 503}

    async def bank_holidays(request):
        state["calls"] += 1
        if state["calls"] <= state["failures"]:
            return web.Response(status=state["status"])
        return web.json_response(FEED)

    app = web.Application()
    app.router.add_get("/bank-holidays.json", bank_holidays)
    server = test_utils.TestServer(app)
    await server.start_server()
    yield server, state
    await server.close()


@pytest.fixture
async def http_client():
    client = HttpClient(max_retries=3, retry_delay=0)
    yield client
    await client.close()


@pytest.mark.asyncio
async def test_server_errors_are_retried(feed_server, http_client):
    server, state = feed_server
    state["failures"] = 2

    data = await http_client.get_json(str(server.make_url("/bank-holidays.json")))

    assert data == FEED
    assert state["calls"] == 3


@pytest.mark.asyncio
async def test_client_errors_are_not_retried(feed_server, http_client):
    server, state = feed_server
    state["failures"] = 5
    state["status"] = 404

    with pytest.raises(aiohttp.ClientResponseError):
        await http_client.get_json(str(server.make_url("/bank-holidays.json")))

    assert state["calls"] == 1


@pytest.mark.asyncio
async def test_relative_endpoint_uses_base_url(feed_server):
    server, state = feed_server
    client = HttpClient(base_url=str(server.make_url("/")), retry_delay=0)
    try:
        data = await client.get_json("bank-holidays.json")
    finally:
        await client.close()

    assert data == FEED


@pytest.mark.asyncio
async def test_feed_client_parses_events(feed_server, http_client):
    server, _ = feed_server
    feed = BankHolidayFeedClient(http_client, str(server.make_url("/bank-holidays.json")))

    holidays = await feed.fetch()

    assert [(holiday.date, holiday.region) for holiday in holidays] == [
        (date(2025, 12, 25), Region.ENGLAND_AND_WALES)
    ]


@pytest.mark.asyncio
async def test_feed_client_reports_unavailable_feed(feed_server, http_client):
    server, state = feed_server
    state["failures"] = 3

    feed = BankHolidayFeedClient(http_client, str(server.make_url("/bank-holidays.json")))

    with pytest.raises(ExternalServiceError):
        await feed.fetch()
    assert state["calls"] == 3
