"""Data access facade: quotes, historical bars, and news."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timezone
from typing import Any, Protocol, TypeVar

import httpx

from market_dash.data.cache import NEWS_CACHE_TTL, TTLCache
from market_dash.data.rss_client import (
    DEFAULT_NEWS_LIMIT,
    NEWS_ENDPOINT,
    build_feed_url,
    fetch_feed,
    parse_feed,
)
from market_dash.data.serializer import RequestSerializer
from market_dash.models import HistoricalBar, NewsItem, QuoteData
from market_dash.utils.normalize import normalize_history, normalize_quote
from market_dash.utils.validators import (
    DEFAULT_INTERVAL,
    DEFAULT_RANGE,
    HistoricalParams,
    normalize_symbol,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QuoteProvider(Protocol):
    """External quote/historical provider."""

    source: str

    async def quote(self, symbol: str) -> dict[str, Any]: ...

    async def historical(
        self, symbol: str, start: datetime, end: datetime, interval: str
    ) -> list[dict[str, Any]]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MarketData:
    """
    Facade over the provider, the news feed, the request queue and caches.

    One instance is created per process and handed to the request handlers.
    It owns the only shared mutable state: the serializer's tail and the two
    caches. All of it is touched from the event loop thread only.
    """

    def __init__(
        self,
        provider: QuoteProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        serializer: RequestSerializer | None = None,
        historical_cache: TTLCache | None = None,
        news_cache: TTLCache | None = None,
        news_endpoint: str = NEWS_ENDPOINT,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if provider is None:
            from market_dash.data.yfinance_client import YFinanceProvider

            provider = YFinanceProvider()
        self.provider = provider
        self._owns_http_client = http_client is None
        self.http_client = http_client if http_client is not None else httpx.AsyncClient()
        self.serializer = serializer if serializer is not None else RequestSerializer()
        self.historical_cache = historical_cache if historical_cache is not None else TTLCache()
        self.news_cache = news_cache if news_cache is not None else TTLCache(ttl=NEWS_CACHE_TTL)
        self.news_endpoint = news_endpoint
        self._clock = clock

    async def fetch_quote(self, symbol: str) -> QuoteData:
        """
        Fetch and normalize a quote snapshot.

        Raises:
            Exception: Whatever the provider raised (no retry)
        """
        normalized_symbol = normalize_symbol(symbol)
        raw = await self.serializer.enqueue(lambda: self.provider.quote(normalized_symbol))
        return normalize_quote(raw, normalized_symbol)

    async def fetch_quotes(self, symbols: Iterable[str]) -> list[QuoteData | None]:
        """
        Fetch several quotes, isolating failures per symbol.

        Returns:
            One slot per symbol, None where that symbol's fetch failed
        """
        symbols = list(symbols)
        results = await asyncio.gather(
            *(self.fetch_quote(symbol) for symbol in symbols),
            return_exceptions=True,
        )
        quotes: list[QuoteData | None] = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.warning(f"fetch_quote({symbol}) failed: {result}")
                quotes.append(None)
            else:
                quotes.append(result)
        return quotes

    async def fetch_historical(
        self,
        symbol: str,
        range: str = DEFAULT_RANGE,
        interval: str = DEFAULT_INTERVAL,
    ) -> tuple[HistoricalBar, ...]:
        """
        Fetch OHLC bars for a range, served from cache within the TTL.

        Args:
            symbol: Ticker symbol
            range: 5d, 1mo, 3mo, 6mo, 1y
            interval: 1d, 1wk

        Returns:
            Bars ascending by date; cached tuples are shared

        Raises:
            ValueError: If range or interval is not allowed
        """
        params = HistoricalParams(symbol=symbol, range=range, interval=interval)
        key = params.cache_key()

        cached = self.historical_cache.get(key)
        if cached is not None:
            logger.debug(f"historical cache hit: {key}")
            return cached

        logger.debug(f"historical cache miss: {key}")
        start, end = params.window(self._clock())
        entries = await self.serializer.enqueue(
            lambda: self.provider.historical(params.symbol, start, end, params.interval)
        )
        bars = normalize_history(entries)
        self.historical_cache.store(key, bars)
        return bars

    async def fetch_news(self, symbol: str, limit: int = DEFAULT_NEWS_LIMIT) -> list[NewsItem]:
        """
        Fetch headlines for a symbol from the RSS feed.

        Bypasses the request queue. The raw feed body is cached per URL.

        Raises:
            NewsFeedUnavailableError: On non-success status or unparseable body
        """
        url = build_feed_url(symbol, self.news_endpoint)
        xml_text = self.news_cache.get(url)
        if xml_text is None:
            xml_text = await fetch_feed(self.http_client, url)
            self.news_cache.store(url, xml_text)
        else:
            logger.debug(f"news cache hit: {url}")
        return parse_feed(xml_text, limit)

    async def aclose(self) -> None:
        """Release the HTTP client and provider resources."""
        if self._owns_http_client:
            await self.http_client.aclose()
        close = getattr(self.provider, "close", None)
        if close is not None:
            close()


class LatestRequest:
    """
    Keep only the newest request of an interactive slot alive.

    Starting a request cancels the one it supersedes. The superseded caller
    gets None rather than an error; a caller that is itself cancelled still
    sees CancelledError.
    """

    def __init__(self) -> None:
        self._current: asyncio.Task[Any] | None = None

    async def run(self, request: Callable[[], Awaitable[T]]) -> T | None:
        previous = self._current
        if previous is not None and not previous.done():
            previous.cancel()

        task: asyncio.Task[T] = asyncio.ensure_future(request())
        self._current = task
        try:
            return await task
        except asyncio.CancelledError:
            caller = asyncio.current_task()
            if caller is not None and caller.cancelling():
                raise
            logger.debug("request superseded by a newer one")
            return None
        finally:
            if self._current is task:
                self._current = None
