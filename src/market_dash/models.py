"""Value objects returned by the data layer."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class QuoteData:
    """
    Point-in-time snapshot of a tradable symbol.

    price, change and change_percent always carry a number (0 when the
    provider omits them). Every other numeric field is None when absent.
    """

    symbol: str
    name: str
    currency: str
    exchange: str
    price: float
    change: float
    change_percent: float
    day_low: float | None = None
    day_high: float | None = None
    open: float | None = None
    previous_close: float | None = None
    timestamp: int | None = None
    bid: float | None = None
    ask: float | None = None
    bid_size: float | None = None
    ask_size: float | None = None
    fifty_two_week_low: float | None = None
    fifty_two_week_high: float | None = None
    volume: float | None = None
    average_volume: float | None = None
    market_cap: float | None = None
    beta: float | None = None
    trailing_pe: float | None = None
    trailing_eps: float | None = None
    earnings_date: str | None = None
    dividend_rate: float | None = None
    dividend_yield: float | None = None
    ex_dividend_date: str | None = None
    target_mean_price: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HistoricalBar:
    """One OHLC record. date is a YYYY-MM-DD calendar date."""

    date: str
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NewsItem:
    """One headline from the news feed."""

    title: str
    link: str
    pub_date: str
    source: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
