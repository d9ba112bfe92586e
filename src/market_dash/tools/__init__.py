"""Market data tools."""

from market_dash.tools.historical import price_history
from market_dash.tools.markets import crypto_quotes, index_quotes, market_quotes
from market_dash.tools.news import stock_news
from market_dash.tools.quote import stock_quote

__all__ = [
    "crypto_quotes",
    "index_quotes",
    "market_quotes",
    "price_history",
    "stock_news",
    "stock_quote",
]
