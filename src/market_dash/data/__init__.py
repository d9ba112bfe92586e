"""Data layer for fetching, normalizing and caching market data."""

from market_dash.data.cache import CacheEntry, TTLCache
from market_dash.data.market_data import LatestRequest, MarketData, QuoteProvider
from market_dash.data.rss_client import NewsFeedUnavailableError, parse_feed
from market_dash.data.serializer import RequestSerializer
from market_dash.data.yfinance_client import YFinanceProvider
from market_dash.models import HistoricalBar, NewsItem, QuoteData

__all__ = [
    # Cache
    "CacheEntry",
    "TTLCache",
    # Facade
    "LatestRequest",
    "MarketData",
    "QuoteProvider",
    "RequestSerializer",
    # Models
    "HistoricalBar",
    "NewsItem",
    "QuoteData",
    # Providers
    "NewsFeedUnavailableError",
    "YFinanceProvider",
    "parse_feed",
]
