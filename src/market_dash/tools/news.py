"""Stock news tool."""

from time import perf_counter
from typing import Any

from market_dash.data.market_data import MarketData
from market_dash.data.rss_client import DEFAULT_NEWS_LIMIT
from market_dash.utils.provenance import build_error_response, build_meta, build_provenance
from market_dash.utils.validators import normalize_symbol


async def stock_news(market: MarketData, symbol: str, limit: int = DEFAULT_NEWS_LIMIT) -> dict[str, Any]:
    """
    Get recent headlines for a stock.

    Args:
        market: Data access facade
        symbol: Stock ticker symbol
        limit: Maximum number of headlines (default: 8)

    Returns:
        Dict with news items
    """
    start_time = perf_counter()
    normalized_symbol = normalize_symbol(symbol or "")

    if not normalized_symbol:
        return build_error_response(
            error_type="invalid_parameters",
            message="Parameter `symbol` is required.",
        )

    try:
        limit = int(limit)
    except (TypeError, ValueError, OverflowError):
        limit = DEFAULT_NEWS_LIMIT

    try:
        news = await market.fetch_news(normalized_symbol, limit)
    except Exception as e:
        return build_error_response(
            error_type="data_unavailable",
            message=str(e) or "Unable to retrieve news feed.",
            symbol=normalized_symbol,
        )

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("stock_news", duration_ms),
        "data_provenance": {
            "news": build_provenance(source="yahoo_rss"),
        },
        "symbol": normalized_symbol,
        "article_count": len(news),
        "news": [item.to_dict() for item in news],
    }
