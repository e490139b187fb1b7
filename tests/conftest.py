"""Pytest configuration and shared fixtures."""

import asyncio
from typing import Optional, Union

import pytest

from sheetfeed.config import Settings
from sheetfeed.feeds import FeedLoader, Transport
from sheetfeed.sheets import Spreadsheet

NAMESPACES = (
    "xmlns='http://www.w3.org/2005/Atom' "
    "xmlns:openSearch='http://a9.com/-/spec/opensearchrss/1.0/' "
    "xmlns:gs='http://schemas.google.com/spreadsheets/2006' "
    "xmlns:gsx='http://schemas.google.com/spreadsheets/2006/extended'"
)

BASE = "https://spreadsheets.google.com/feeds"

WORKSHEETS_FEED = f"""<?xml version='1.0' encoding='UTF-8'?>
<feed {NAMESPACES}>
  <id>{BASE}/worksheets/key123/public/values</id>
  <updated>2011-03-01T10:00:00.000Z</updated>
  <title type='text'>Budget</title>
  <author><name>alice</name><email>alice@example.com</email></author>
  <openSearch:totalResults>2</openSearch:totalResults>
  <openSearch:startIndex>1</openSearch:startIndex>
  <entry>
    <id>{BASE}/worksheets/key123/public/values/od6</id>
    <updated>2011-03-01T10:00:00.000Z</updated>
    <title type='text'>Income</title>
    <gs:rowCount>100</gs:rowCount>
  </entry>
  <entry>
    <id>{BASE}/worksheets/key123/public/values/od7</id>
    <updated>2011-03-02T11:30:00.000Z</updated>
    <title type='text'>Expenses</title>
    <gs:rowCount>50</gs:rowCount>
  </entry>
</feed>
"""

SINGLE_WORKSHEET_FEED = f"""<?xml version='1.0' encoding='UTF-8'?>
<feed {NAMESPACES}>
  <title type='text'>Solo</title>
  <openSearch:totalResults>1</openSearch:totalResults>
  <openSearch:startIndex>1</openSearch:startIndex>
  <entry>
    <id>{BASE}/worksheets/key123/public/values/od6</id>
    <updated>2011-03-01T10:00:00.000Z</updated>
    <title type='text'>Only</title>
  </entry>
</feed>
"""

LIST_FEED = f"""<?xml version='1.0' encoding='UTF-8'?>
<feed {NAMESPACES}>
  <title type='text'>Income</title>
  <openSearch:totalResults>12</openSearch:totalResults>
  <openSearch:startIndex>5</openSearch:startIndex>
  <entry>
    <id>{BASE}/list/key123/od6/public/values/cokwr</id>
    <updated>2011-03-01T10:00:00.000Z</updated>
    <title type='text'>Rent</title>
    <gsx:name>Rent</gsx:name>
    <gsx:amount>1200</gsx:amount>
    <gsx:notes></gsx:notes>
  </entry>
  <entry>
    <id>{BASE}/list/key123/od6/public/values/cpzh4</id>
    <updated>2011-03-01T10:05:00.000Z</updated>
    <title type='text'>Food</title>
    <gsx:name>Food</gsx:name>
    <gsx:amount>300</gsx:amount>
    <gsx:notes>weekly</gsx:notes>
  </entry>
</feed>
"""

EMPTY_FEED = f"""<?xml version='1.0' encoding='UTF-8'?>
<feed {NAMESPACES}>
  <title type='text'>Empty</title>
  <openSearch:totalResults>0</openSearch:totalResults>
  <openSearch:startIndex>1</openSearch:startIndex>
</feed>
"""

CELLS_FEED = f"""<?xml version='1.0' encoding='UTF-8'?>
<feed {NAMESPACES}>
  <title type='text'>Income</title>
  <openSearch:totalResults>3</openSearch:totalResults>
  <openSearch:startIndex>1</openSearch:startIndex>
  <entry>
    <id>{BASE}/cells/key123/od6/public/values/R1C1</id>
    <updated>2011-03-01T10:00:00.000Z</updated>
    <gs:cell row='1' col='1' inputValue='Name'>Name</gs:cell>
  </entry>
  <entry>
    <id>{BASE}/cells/key123/od6/public/values/R1C2</id>
    <updated>2011-03-01T10:00:00.000Z</updated>
    <gs:cell row='1' col='2' inputValue='Amount'>Amount</gs:cell>
  </entry>
  <entry>
    <id>{BASE}/cells/key123/od6/public/values/R3C5</id>
    <updated>2011-03-01T10:00:00.000Z</updated>
    <gs:cell row='3' col='5' inputValue='42'>42</gs:cell>
  </entry>
</feed>
"""


def cell_entry(row: int, col: int, value: str = "") -> str:
    """Build a single cells-feed entry document, as returned for an entry URL."""
    return f"""<?xml version='1.0' encoding='UTF-8'?>
<entry {NAMESPACES}>
  <id>{BASE}/cells/key123/od6/public/values/R{row}C{col}</id>
  <updated>2011-03-01T10:00:00.000Z</updated>
  <gs:cell row='{row}' col='{col}' inputValue='{value}'>{value}</gs:cell>
</entry>
"""


def row_entry(entry_id: str, **fields: str) -> str:
    """Build a single list-feed entry document."""
    columns = "".join(f"<gsx:{name}>{value}</gsx:{name}>" for name, value in fields.items())
    return f"""<?xml version='1.0' encoding='UTF-8'?>
<entry {NAMESPACES}>
  <id>{BASE}/list/key123/od6/public/values/{entry_id}</id>
  <updated>2011-03-01T10:00:00.000Z</updated>
  {columns}
</entry>
"""


Response = Union[tuple[int, str], Exception]


class FakeTransport(Transport):
    """In-memory transport.

    Responses are taken from ``routes`` when the URL path ends with a route
    key, otherwise from the ``responses`` queue in order. Every request is
    recorded in ``requests`` as ``(url, headers)``, and every request that
    returned a response in ``completed``. ``route_delays`` holds extra
    per-route sleeps on top of ``delay``.
    """

    def __init__(
        self,
        responses: Optional[list[Response]] = None,
        routes: Optional[dict[str, Response]] = None,
        delay: float = 0.0,
        route_delays: Optional[dict[str, float]] = None,
    ):
        self.responses = list(responses or [])
        self.routes = routes or {}
        self.delay = delay
        self.route_delays = route_delays or {}
        self.completed: list[str] = []
        self.requests: list[tuple[str, dict]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def request(self, url, method="GET", headers=None):
        self.requests.append((url, dict(headers or {})))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delay + self._route_delay(url)
            if delay:
                await asyncio.sleep(delay)
            response = self._next(url)
        finally:
            self.in_flight -= 1
        if isinstance(response, Exception):
            raise response
        self.completed.append(url)
        return response

    def _route_delay(self, url: str) -> float:
        path = url.split("?")[0]
        for suffix, delay in self.route_delays.items():
            if path.endswith(suffix):
                return delay
        return 0.0

    def _next(self, url: str) -> Response:
        path = url.split("?")[0]
        for suffix, response in self.routes.items():
            if path.endswith(suffix):
                return response
        if not self.responses:
            raise AssertionError(f"Unexpected request: {url}")
        return self.responses.pop(0)

    async def aclose(self):
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.requests]


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no backoff delay."""
    return Settings(
        feed_base_url=BASE,
        feed_locale="en",
        request_timeout_seconds=5.0,
        max_auth_attempts=3,
        auth_backoff_seconds=0.0,
        debug=False,
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def spreadsheet(fake_transport: FakeTransport, test_settings: Settings) -> Spreadsheet:
    """A public spreadsheet backed by the fake transport."""
    return Spreadsheet(
        "key123",
        loader=FeedLoader(transport=fake_transport, config=test_settings),
    )
