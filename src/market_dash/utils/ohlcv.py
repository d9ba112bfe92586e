"""OHLCV frame conversion utilities."""

from typing import Any

import pandas as pd

ENTRY_COLUMNS = ["date", "open", "high", "low", "close", "volume"]


def frame_to_entries(df: pd.DataFrame) -> list[dict[str, Any]]:
    """
    Convert a yfinance history frame into raw historical entries.

    Output keys (always): date, open, high, low, close, volume.
    `date` is the bar's index instant as a pandas Timestamp. Missing
    columns and NaN values become None.

    Args:
        df: Frame from `Ticker.history()` (DatetimeIndex, capitalized columns)

    Returns:
        List of entry dicts in index order
    """
    if df.empty:
        return []

    df = df.copy()

    # Handle multi-index from yf.download (when fetching multiple tickers)
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)

    # Lowercase all column names
    df.columns = df.columns.str.lower()

    # Reset index to make date a column
    df = df.reset_index()

    # Normalize date column name
    date_cols = [c for c in df.columns if str(c).lower() in ("date", "datetime", "index")]
    if date_cols:
        df = df.rename(columns={date_cols[0]: "date"})

    for col in ENTRY_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df = df[ENTRY_COLUMNS].astype(object)
    df = df.where(pd.notna(df), None)

    return df.to_dict("records")
