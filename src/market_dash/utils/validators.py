"""Validation utilities and parameter classes."""

from dataclasses import dataclass
from datetime import datetime, timedelta

# Allowlists for cache key stability
VALID_RANGES = ("5d", "1mo", "3mo", "6mo", "1y")
VALID_INTERVALS = ("1d", "1wk")

DEFAULT_RANGE = "1mo"
DEFAULT_INTERVAL = "1d"

# How far back each range reaches from "now"
_RANGE_OFFSETS: dict[str, timedelta | int] = {
    "5d": timedelta(days=5),
    "1mo": 1,
    "3mo": 3,
    "6mo": 6,
    "1y": 12,
}


def months_before(now: datetime, months: int) -> datetime:
    """
    Step back whole calendar months, keeping day of month and time.

    A day past the end of the target month rolls forward into the next one
    (Mar 31 minus 1 month is Mar 2 in a leap year).
    """
    total = now.year * 12 + now.month - 1 - months
    first = now.replace(year=total // 12, month=total % 12 + 1, day=1)
    return first + timedelta(days=now.day - 1)


def normalize_symbol(symbol: str) -> str:
    """Uppercase and strip a ticker symbol."""
    return symbol.upper().strip()


@dataclass(frozen=True)
class HistoricalParams:
    """Immutable historical request parameters. Used for cache key + fetch."""

    symbol: str
    range: str = DEFAULT_RANGE
    interval: str = DEFAULT_INTERVAL

    def __post_init__(self) -> None:
        # Normalize symbol: uppercase, strip whitespace
        object.__setattr__(self, "symbol", normalize_symbol(self.symbol))

        range_ = self.range.lower().strip()
        interval = self.interval.lower().strip()

        if range_ not in VALID_RANGES:
            raise ValueError(
                f"Invalid range '{self.range}'. Must be one of: {', '.join(VALID_RANGES)}"
            )
        if interval not in VALID_INTERVALS:
            raise ValueError(
                f"Invalid interval '{self.interval}'. Must be one of: {', '.join(VALID_INTERVALS)}"
            )

        object.__setattr__(self, "range", range_)
        object.__setattr__(self, "interval", interval)

    def cache_key(self) -> str:
        """Canonical cache key: SYMBOL|range|interval."""
        return f"{self.symbol}|{self.range}|{self.interval}"

    def window(self, now: datetime) -> tuple[datetime, datetime]:
        """
        Date window for the provider query.

        Month and year offsets use calendar arithmetic (see months_before).
        The end is one day past now so the current session is included.

        Args:
            now: Reference instant

        Returns:
            Tuple of (start, end)
        """
        offset = _RANGE_OFFSETS[self.range]
        if isinstance(offset, timedelta):
            start = now - offset
        else:
            start = months_before(now, offset)
        end = now + timedelta(days=1)
        return start, end
