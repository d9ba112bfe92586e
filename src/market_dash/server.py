"""Market data MCP server using FastMCP."""

import json
import logging
import os
from collections import defaultdict
from functools import lru_cache
from typing import Any

from fastmcp import FastMCP

from market_dash import SCHEMA_VERSION, SERVER_VERSION
from market_dash.data.market_data import LatestRequest, MarketData
from market_dash.tools import (
    crypto_quotes,
    index_quotes,
    price_history,
    stock_news,
    stock_quote,
)
from market_dash.utils.validators import HistoricalParams, normalize_symbol

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="market-dash",
)


@lru_cache(maxsize=1)
def get_market_data() -> MarketData:
    """Process-wide data facade (request queue and caches live here)."""
    return MarketData()


# One history slot per symbol: a new range request replaces the pending one
_history_slots: defaultdict[str, LatestRequest] = defaultdict(LatestRequest)


def _dumps(result: dict[str, Any]) -> str:
    return json.dumps(result, indent=2, default=str)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
async def get_quote(
    symbol: str,
    include_history: bool = False,
    range: str = "1mo",
    interval: str = "1d",
) -> str:
    """
    Get the latest quote for a stock, index, or crypto symbol.

    Args:
        symbol: Ticker symbol (e.g., AAPL, ^GSPC, BTC-USD)
        include_history: Also return historical bars (default: false)
        range: History range - 5d, 1mo, 3mo, 6mo, 1y
        interval: History interval - 1d, 1wk

    Returns:
        JSON with quote fields and optional history
    """
    result = await stock_quote(
        get_market_data(),
        symbol=symbol,
        include_history=include_history,
        range=range,
        interval=interval,
    )
    return _dumps(result)


@mcp.tool
async def get_historical(symbol: str, range: str = "1mo") -> str:
    """
    Get daily OHLC bars for a symbol.

    Args:
        symbol: Ticker symbol
        range: 5d, 1mo, 3mo, 6mo, 1y (default: 1mo)

    Returns:
        JSON with history rows (date, open, high, low, close)
    """
    slot = _history_slots[normalize_symbol(symbol or "")]
    result = await price_history(get_market_data(), symbol=symbol, range=range, slot=slot)
    return _dumps(result)


@mcp.tool
async def get_news(symbol: str, limit: int = 8) -> str:
    """
    Get recent headlines for a symbol from the Yahoo Finance RSS feed.

    Args:
        symbol: Ticker symbol
        limit: Maximum number of headlines (default: 8)

    Returns:
        JSON with news items (title, link, pub_date, source, description)
    """
    result = await stock_news(get_market_data(), symbol=symbol, limit=limit)
    return _dumps(result)


@mcp.tool
async def get_indices(symbols: str | None = None) -> str:
    """
    Get quotes for market indices.

    Args:
        symbols: Comma-separated symbols (default: ^GSPC,^DJI,^IXIC,^RUT)

    Returns:
        JSON with one quote per symbol; null where that symbol failed
    """
    result = await index_quotes(get_market_data(), symbols=symbols)
    return _dumps(result)


@mcp.tool
async def get_crypto(symbols: str | None = None) -> str:
    """
    Get quotes for cryptocurrencies.

    Args:
        symbols: Comma-separated symbols (default: popular USD pairs)

    Returns:
        JSON with one quote per symbol; null where that symbol failed
    """
    result = await crypto_quotes(get_market_data(), symbols=symbols)
    return _dumps(result)


# ============================================================================
# RESOURCES
# ============================================================================


@mcp.resource("history://{symbol}/{range}/{interval}")
def get_cached_history(symbol: str, range: str, interval: str) -> str:
    """
    Get cached historical bars as JSON.

    Serves cached data only; call get_quote or get_historical first.
    """
    try:
        params = HistoricalParams(symbol=symbol, range=range, interval=interval)
    except ValueError as e:
        return f"Error: {e}"

    bars = get_market_data().historical_cache.get(params.cache_key())
    if bars is None:
        return f"Resource not cached. Call get_historical('{params.symbol}', '{params.range}') first."
    return json.dumps([bar.to_dict() for bar in bars], indent=2)


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Market Dash MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    mcp.run()


if __name__ == "__main__":
    main()
