"""Stock quote tool."""

import asyncio
from time import perf_counter
from typing import Any

from market_dash.data.market_data import MarketData
from market_dash.utils.provenance import build_error_response, build_meta, build_provenance
from market_dash.utils.validators import (
    DEFAULT_INTERVAL,
    DEFAULT_RANGE,
    HistoricalParams,
    normalize_symbol,
)


async def stock_quote(
    market: MarketData,
    symbol: str,
    include_history: bool = False,
    range: str = DEFAULT_RANGE,
    interval: str = DEFAULT_INTERVAL,
) -> dict[str, Any]:
    """
    Get the latest quote for a symbol, optionally with historical bars.

    Args:
        market: Data access facade
        symbol: Stock ticker symbol
        include_history: Also fetch bars for range/interval (default: False)
        range: History range (5d, 1mo, 3mo, 6mo, 1y)
        interval: History interval (1d, 1wk)

    Returns:
        Dict with quote and history (null unless requested)
    """
    start_time = perf_counter()
    normalized_symbol = normalize_symbol(symbol or "")

    if not normalized_symbol:
        return build_error_response(
            error_type="invalid_parameters",
            message="Parameter `symbol` is required.",
        )

    try:
        params = HistoricalParams(symbol=normalized_symbol, range=range, interval=interval)
    except ValueError as e:
        return build_error_response(
            error_type="invalid_parameters",
            message=str(e),
            symbol=normalized_symbol,
        )

    async def _no_history() -> None:
        return None

    try:
        quote, history = await asyncio.gather(
            market.fetch_quote(normalized_symbol),
            market.fetch_historical(params.symbol, params.range, params.interval)
            if include_history
            else _no_history(),
        )
    except Exception as e:
        return build_error_response(
            error_type="data_unavailable",
            message=str(e) or "Unable to retrieve market data.",
            symbol=normalized_symbol,
        )

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("stock_quote", duration_ms),
        "data_provenance": {
            "quote": build_provenance(source=market.provider.source),
        },
        "symbol": normalized_symbol,
        "quote": quote.to_dict(),
        "history": [bar.to_dict() for bar in history] if history is not None else None,
    }
