"""Async yfinance provider for quotes and historical bars."""

import asyncio
import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, TypeVar

import yfinance as yf

from market_dash.utils.ohlcv import frame_to_entries
from market_dash.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)

# yfinance is synchronous; calls run in a small thread pool
_max_workers = int(os.environ.get("YF_MAX_WORKERS", "1"))

T = TypeVar("T")


class YFinanceProvider:
    """
    Quote and historical provider backed by yfinance.

    Each method runs the blocking yfinance call in the executor so only the
    calling task is suspended. No retries: failures propagate to the caller.
    """

    source = "yfinance"

    def __init__(self, max_workers: int = _max_workers):
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

    async def _run(self, operation_name: str, sync_func: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        logger.debug(f"{operation_name}: dispatching to executor")
        return await loop.run_in_executor(self._executor, sync_func)

    async def quote(self, symbol: str) -> dict[str, Any]:
        """
        Fetch a quote snapshot.

        Args:
            symbol: Ticker symbol

        Returns:
            Raw info dict from yfinance

        Raises:
            ValueError: If yfinance returns no data for the symbol
        """
        normalized_symbol = normalize_symbol(symbol)

        def _fetch() -> dict[str, Any]:
            info = yf.Ticker(normalized_symbol).info
            if not info:
                raise ValueError(f"Invalid symbol: {symbol}")
            return dict(info)

        return await self._run(f"quote({normalized_symbol})", _fetch)

    async def historical(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        interval: str,
    ) -> list[dict[str, Any]]:
        """
        Fetch OHLC bars between start and end.

        Returns:
            Raw entries (see frame_to_entries), ascending by date
        """
        normalized_symbol = normalize_symbol(symbol)

        def _fetch() -> list[dict[str, Any]]:
            df = yf.Ticker(normalized_symbol).history(
                start=start,
                end=end,
                interval=interval,
                auto_adjust=False,
                raise_errors=True,
            )
            return frame_to_entries(df)

        return await self._run(f"historical({normalized_symbol}, {interval})", _fetch)

    def close(self) -> None:
        """Cleanup on shutdown."""
        self._executor.shutdown(wait=False, cancel_futures=True)
