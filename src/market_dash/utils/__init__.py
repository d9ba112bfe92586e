"""Utility modules."""

from market_dash.utils.normalize import (
    format_display_date,
    normalize_history,
    normalize_quote,
    to_datetime,
    to_number,
)
from market_dash.utils.ohlcv import frame_to_entries
from market_dash.utils.provenance import build_error_response, build_meta, build_provenance
from market_dash.utils.validators import HistoricalParams, normalize_symbol

__all__ = [
    "format_display_date",
    "normalize_history",
    "normalize_quote",
    "to_datetime",
    "to_number",
    "frame_to_entries",
    "build_error_response",
    "build_meta",
    "build_provenance",
    "HistoricalParams",
    "normalize_symbol",
]
