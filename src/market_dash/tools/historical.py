"""Price history tool."""

from collections.abc import Awaitable
from time import perf_counter
from typing import Any

from market_dash.data.market_data import LatestRequest, MarketData
from market_dash.models import HistoricalBar
from market_dash.utils.provenance import build_error_response, build_meta, build_provenance
from market_dash.utils.validators import DEFAULT_RANGE, VALID_RANGES, normalize_symbol


async def price_history(
    market: MarketData,
    symbol: str,
    range: str = DEFAULT_RANGE,
    slot: LatestRequest | None = None,
) -> dict[str, Any]:
    """
    Fetch daily bars for a range.

    An unrecognized range falls back to 1mo rather than failing. With a
    slot, a newer request through the same slot supersedes this one and
    this call returns a `superseded` error.

    Args:
        market: Data access facade
        symbol: Stock ticker symbol
        range: 5d, 1mo, 3mo, 6mo, 1y (default: 1mo)
        slot: Request slot shared by callers that replace each other

    Returns:
        Dict with history rows
    """
    start_time = perf_counter()
    normalized_symbol = normalize_symbol(symbol or "")
    range = range if range in VALID_RANGES else DEFAULT_RANGE

    if not normalized_symbol:
        return build_error_response(
            error_type="invalid_parameters",
            message="Parameter `symbol` is required.",
        )

    def fetch() -> Awaitable[tuple[HistoricalBar, ...]]:
        return market.fetch_historical(normalized_symbol, range, "1d")

    try:
        bars = await (slot.run(fetch) if slot is not None else fetch())
    except Exception as e:
        return build_error_response(
            error_type="data_unavailable",
            message=str(e) or "Unable to retrieve historical data.",
            symbol=normalized_symbol,
        )

    if bars is None:
        return build_error_response(
            error_type="superseded",
            message="Request superseded by a newer one.",
            symbol=normalized_symbol,
        )

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("price_history", duration_ms),
        "data_provenance": {
            "price": build_provenance(
                source=market.provider.source,
                last_bar_date=bars[-1].date if bars else None,
            ),
        },
        "symbol": normalized_symbol,
        "range": range,
        "interval": "1d",
        "history": [bar.to_dict() for bar in bars],
    }
