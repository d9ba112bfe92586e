"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import httpx
import pandas as pd
import pytest

from market_dash.data.cache import TTLCache
from market_dash.data.market_data import MarketData

FIXED_NOW = datetime(2024, 3, 15, 14, 30, tzinfo=timezone.utc)

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Yahoo! Finance: AAPL News</title>
    <item>
      <title>Apple unveils new chip</title>
      <link>https://finance.yahoo.com/news/apple-chip</link>
      <pubDate>Fri, 15 Mar 2024 12:00:00 +0000</pubDate>
      <source url="https://www.reuters.com/">Reuters</source>
      <description>Apple announced a new processor.</description>
    </item>
    <item>
      <title>Apple shares rise</title>
      <link>https://finance.yahoo.com/news/apple-shares</link>
      <pubDate>Fri, 15 Mar 2024 11:00:00 +0000</pubDate>
    </item>
    <item>
      <title>Analysts weigh in on Apple</title>
      <link>https://finance.yahoo.com/news/apple-analysts</link>
      <pubDate>Fri, 15 Mar 2024 10:00:00 +0000</pubDate>
    </item>
  </channel>
</rss>
"""


class FakeClock:
    """Monotonic clock under test control."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """In-memory provider that records call order and overlap."""

    source = "fake"

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.quotes: dict[str, Any] = {}
        self.history: list[dict[str, Any]] | Exception = []
        self.calls: list[tuple[Any, ...]] = []
        self.events: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _call(self, name: str, result: Any) -> Any:
        self.events.append(("start", name))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if isinstance(result, Exception):
                raise result
            return result
        finally:
            self.in_flight -= 1
            self.events.append(("end", name))

    async def quote(self, symbol: str) -> dict[str, Any]:
        self.calls.append(("quote", symbol))
        return await self._call(symbol, self.quotes.get(symbol, {"symbol": symbol}))

    async def historical(
        self, symbol: str, start: datetime, end: datetime, interval: str
    ) -> list[dict[str, Any]]:
        self.calls.append(("historical", symbol, start, end, interval))
        return await self._call(symbol, self.history)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def sample_feed() -> str:
    return SAMPLE_FEED


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def feed_requests() -> list[httpx.Request]:
    """Requests seen by the mock news transport."""
    return []


@pytest.fixture
def feed_response() -> dict[str, Any]:
    """Mutable response served by the mock news transport."""
    return {"status": 200, "text": SAMPLE_FEED}


@pytest.fixture
def make_market(
    fake_provider: FakeProvider,
    fake_clock: FakeClock,
    feed_requests: list[httpx.Request],
    feed_response: dict[str, Any],
) -> Callable[..., MarketData]:
    """Factory for a MarketData wired to fakes (no network)."""

    def handler(request: httpx.Request) -> httpx.Response:
        feed_requests.append(request)
        return httpx.Response(feed_response["status"], text=feed_response["text"])

    def _make(**kwargs: Any) -> MarketData:
        kwargs.setdefault("provider", fake_provider)
        kwargs.setdefault("http_client", httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        kwargs.setdefault("historical_cache", TTLCache(ttl=300, clock=fake_clock))
        kwargs.setdefault("news_cache", TTLCache(ttl=300, clock=fake_clock))
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        return MarketData(**kwargs)

    return _make


@pytest.fixture
def sample_ohlcv_df() -> pd.DataFrame:
    """Sample history frame shaped like yfinance Ticker.history()."""
    return pd.DataFrame(
        {
            "Date": pd.date_range("2024-01-01", periods=10, freq="D", tz="America/New_York"),
            "Open": [100.0, 101.0, 102.0, 101.5, 103.0, 104.0, 103.5, 105.0, 106.0, 105.5],
            "High": [101.0, 102.5, 103.0, 102.5, 104.5, 105.5, 105.0, 106.5, 107.0, 106.5],
            "Low": [99.5, 100.5, 101.0, 100.5, 102.0, 103.0, 102.5, 104.0, 105.0, 104.5],
            "Close": [100.5, 102.0, 101.5, 102.0, 104.0, 103.5, 104.5, 106.0, 105.5, 106.0],
            "Volume": [1000000] * 10,
            "Dividends": [0.0] * 10,
            "Stock Splits": [0.0] * 10,
        }
    ).set_index("Date")
