"""Normalization of raw provider payloads into stable value objects."""

import math
import os
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import Any

import pandas as pd
import pytz

from market_dash.models import HistoricalBar, QuoteData

DISPLAY_TZ = os.environ.get("DISPLAY_TZ", "UTC")

UNKNOWN_NAME = "Unknown Equity"
DEFAULT_CURRENCY = "USD"


def _has_value(v: Any) -> bool:
    """
    Check if a value is truly present (not None, NaN, or empty string).

    yfinance often uses float("nan") for missing numerics, which passes
    `is not None` but should be treated as missing.
    """
    if v is None:
        return False
    if isinstance(v, float) and math.isnan(v):
        return False
    if isinstance(v, str) and v.strip() == "":
        return False
    return True


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present value among keys, or None."""
    for key in keys:
        value = raw.get(key)
        if _has_value(value):
            return value
    return None


def to_number(value: Any) -> float | int | None:
    """
    Coerce a provider value to a finite number.

    NaN, infinities, booleans and non-numeric strings become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def to_datetime(value: Any) -> datetime | None:
    """
    Coerce a provider instant to an aware datetime.

    Accepts datetimes (naive means UTC, pandas.Timestamp included), dates,
    epoch seconds as reported by yfinance, and ISO 8601 strings.
    """
    if not _has_value(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if pd.isna(value):
            return None
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        seconds = to_number(value)
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_display_date(value: Any, tz: str | None = None) -> str | None:
    """
    Format an instant as "Mon D, YYYY" (e.g. "Jan 5, 2025").

    Args:
        value: Provider instant (see to_datetime)
        tz: Timezone name for the calendar day (default: DISPLAY_TZ)

    Returns:
        Display string or None if the value is absent
    """
    dt = to_datetime(value)
    if dt is None:
        return None
    local = dt.astimezone(pytz.timezone(tz or DISPLAY_TZ))
    return f"{local:%b} {local.day}, {local.year}"


def _earnings_date(value: Any) -> str | None:
    # Provider reports either one instant or a [start, end] list
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
    return format_display_date(value)


def _epoch_seconds(value: Any) -> int | None:
    dt = to_datetime(value)
    if dt is None:
        return None
    return math.floor(dt.timestamp())


def normalize_quote(raw: Mapping[str, Any], symbol: str) -> QuoteData:
    """
    Map a raw provider quote into QuoteData.

    Args:
        raw: Provider quote dict (yfinance `Ticker.info` keys)
        symbol: Requested symbol, used when the payload has none

    Returns:
        QuoteData with null-safe defaults
    """
    raw_symbol = _first(raw, "symbol")

    def number(*keys: str) -> float | int | None:
        return to_number(_first(raw, *keys))

    def number_or_zero(key: str) -> float | int:
        value = number(key)
        return value if value is not None else 0

    earnings = raw.get("earningsDate")
    if not _has_value(earnings) or (isinstance(earnings, (list, tuple)) and not earnings):
        earnings = raw.get("earningsTimestamp")

    return QuoteData(
        symbol=raw_symbol if raw_symbol is not None else symbol,
        name=_first(raw, "longName", "shortName", "symbol") or UNKNOWN_NAME,
        currency=_first(raw, "currency") or DEFAULT_CURRENCY,
        exchange=_first(raw, "fullExchangeName", "exchange") or "",
        # Always rendered, so zero rather than absent
        price=number_or_zero("regularMarketPrice"),
        change=number_or_zero("regularMarketChange"),
        change_percent=number_or_zero("regularMarketChangePercent"),
        day_low=number("regularMarketDayLow"),
        day_high=number("regularMarketDayHigh"),
        open=number("regularMarketOpen"),
        previous_close=number("regularMarketPreviousClose"),
        timestamp=_epoch_seconds(raw.get("regularMarketTime")),
        bid=number("bid"),
        ask=number("ask"),
        bid_size=number("bidSize"),
        ask_size=number("askSize"),
        fifty_two_week_low=number("fiftyTwoWeekLow"),
        fifty_two_week_high=number("fiftyTwoWeekHigh"),
        volume=number("regularMarketVolume", "averageVolume10days"),
        average_volume=number("averageVolume"),
        market_cap=number("marketCap"),
        beta=number("beta"),
        trailing_pe=number("trailingPE"),
        trailing_eps=number("trailingEps"),
        earnings_date=_earnings_date(earnings),
        dividend_rate=number("dividendRate"),
        dividend_yield=number("dividendYield"),
        ex_dividend_date=format_display_date(raw.get("exDividendDate")),
        target_mean_price=number("targetMeanPrice"),
    )


def bar_date(value: Any) -> str:
    """
    Calendar date (YYYY-MM-DD) of a bar instant.

    yfinance stamps daily bars at exchange-local midnight, so an aware
    instant is read in its own timezone. Naive instants and epoch seconds
    are UTC.
    """
    dt = to_datetime(value)
    if dt is None:
        raise ValueError(f"Historical entry has no usable date: {value!r}")
    return dt.strftime("%Y-%m-%d")


def normalize_history(entries: Iterable[Mapping[str, Any]]) -> tuple[HistoricalBar, ...]:
    """
    Map raw OHLC entries into HistoricalBar records.

    Provider order is kept (ascending by date).
    """
    return tuple(
        HistoricalBar(
            date=bar_date(entry.get("date")),
            open=to_number(entry.get("open")),
            high=to_number(entry.get("high")),
            low=to_number(entry.get("low")),
            close=to_number(entry.get("close")),
        )
        for entry in entries
    )
