"""Batch quote tools for market indices and cryptocurrencies."""

from collections.abc import Iterable
from time import perf_counter
from typing import Any

from market_dash.data.market_data import MarketData
from market_dash.utils.provenance import build_error_response, build_meta, build_provenance

MAJOR_INDICES: dict[str, str] = {
    "^GSPC": "S&P 500",
    "^DJI": "Dow Jones",
    "^IXIC": "NASDAQ",
    "^RUT": "Russell 2000",
}

POPULAR_CRYPTOS: dict[str, str] = {
    "BTC-USD": "Bitcoin",
    "ETH-USD": "Ethereum",
    "BNB-USD": "BNB",
    "SOL-USD": "Solana",
    "XRP-USD": "XRP",
    "ADA-USD": "Cardano",
    "DOGE-USD": "Dogecoin",
    "AVAX-USD": "Avalanche",
}


def parse_symbols(symbols: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated list (or iterable) into clean upper-case symbols."""
    if symbols is None:
        return []
    if isinstance(symbols, str):
        symbols = symbols.split(",")
    return [s.upper().strip() for s in symbols if s and s.strip()]


async def market_quotes(
    market: MarketData,
    symbols: str | Iterable[str] | None,
    tool: str,
    result_key: str,
) -> dict[str, Any]:
    """
    Fetch quotes for several symbols; one failure never fails the batch.

    Args:
        market: Data access facade
        symbols: Comma-separated string or iterable of symbols
        tool: Tool name for metadata
        result_key: Response key holding the quotes

    Returns:
        Dict with one quote (or null) per symbol, in request order
    """
    start_time = perf_counter()
    symbol_list = parse_symbols(symbols)

    if not symbol_list:
        return build_error_response(
            error_type="invalid_parameters",
            message="Parameter `symbols` is required.",
        )

    quotes = await market.fetch_quotes(symbol_list)
    failed = [s for s, q in zip(symbol_list, quotes) if q is None]

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta(tool, duration_ms),
        "data_provenance": {
            "quote": build_provenance(
                source=market.provider.source,
                failed_symbols=failed,
            ),
        },
        "symbols": symbol_list,
        result_key: [q.to_dict() if q is not None else None for q in quotes],
    }


async def index_quotes(market: MarketData, symbols: str | Iterable[str] | None = None) -> dict[str, Any]:
    """Quotes for market indices (default: major US indices)."""
    return await market_quotes(
        market,
        symbols if symbols else list(MAJOR_INDICES),
        tool="index_quotes",
        result_key="indices",
    )


async def crypto_quotes(market: MarketData, symbols: str | Iterable[str] | None = None) -> dict[str, Any]:
    """Quotes for cryptocurrencies (default: popular USD pairs)."""
    return await market_quotes(
        market,
        symbols if symbols else list(POPULAR_CRYPTOS),
        tool="crypto_quotes",
        result_key="cryptos",
    )
