"""Yahoo Finance market-data client.

Fetch failures never raise: an unavailable quote is None and an unavailable
history is an empty list.
"""

import asyncio
import logging
import math
from datetime import date, datetime
from typing import Any

import pandas as pd
import yfinance as yf

from core.models import PriceBar, Quote

logger = logging.getLogger(__name__)

VALID_PERIODS = ("1d", "5d", "1mo", "3mo", "6mo", "1y", "2y", "5y", "max")
VALID_INTERVALS = ("1d", "1wk", "1mo")


class RateLimiter:
    """Simple rate limiter for API calls."""

    def __init__(self, calls_per_minute: int = 120):
        self.calls_per_minute = calls_per_minute
        self.interval = 60.0 / calls_per_minute
        self.last_call = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait if necessary to respect rate limit."""
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait_time = self.last_call + self.interval - loop.time()
            if wait_time > 0:
                await asyncio.sleep(wait_time)
            self.last_call = loop.time()


def _num(value: Any) -> float:
    """Coerce a provider value to float, mapping missing/NaN to 0."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(result) else result


def normalize_interval(interval: str) -> str:
    """Only daily, weekly and monthly bars are supported; anything else is daily."""
    return interval if interval in VALID_INTERVALS else "1d"


def normalize_period(period: str) -> str:
    return period if period in VALID_PERIODS else "6mo"


def info_to_quote(symbol: str, info: dict[str, Any]) -> Quote | None:
    """Map a yfinance ``info`` dict to a Quote.

    Returns None when the dict carries no price, which is how yfinance
    reports unknown symbols.
    """
    if not info or info.get("regularMarketPrice") is None:
        return None

    return Quote(
        symbol=info.get("symbol") or symbol,
        name=info.get("longName") or info.get("shortName") or "",
        price=_num(info.get("regularMarketPrice")),
        change=_num(info.get("regularMarketChange")),
        change_percent=_num(info.get("regularMarketChangePercent")),
        previous_close=_num(info.get("regularMarketPreviousClose")),
        open=_num(info.get("regularMarketOpen")),
        day_high=_num(info.get("regularMarketDayHigh")),
        day_low=_num(info.get("regularMarketDayLow")),
        volume=_num(info.get("regularMarketVolume")),
        average_volume=_num(info.get("averageDailyVolume10Day")),
        market_cap=_num(info.get("marketCap")),
    )


def frame_to_bars(df: pd.DataFrame | None) -> list[PriceBar]:
    """Convert a yfinance history frame to ascending, date-unique bars.

    Missing OHLCV values become 0. When two rows fall on the same date the
    later one wins.
    """
    if df is None or df.empty:
        return []

    by_date: dict[date, PriceBar] = {}
    for ts, row in df.iterrows():
        day = ts.date() if isinstance(ts, (datetime, pd.Timestamp)) else ts
        by_date[day] = PriceBar(
            date=day,
            open=max(_num(row.get("Open")), 0.0),
            high=max(_num(row.get("High")), 0.0),
            low=max(_num(row.get("Low")), 0.0),
            close=max(_num(row.get("Close")), 0.0),
            volume=max(_num(row.get("Volume")), 0.0),
        )

    return [by_date[d] for d in sorted(by_date)]


class YahooFinanceClient:
    """Async facade over yfinance.

    yfinance is blocking, so each call runs in a worker thread behind a
    shared rate limiter. ``timeout`` bounds the provider call itself; time
    spent queued for a rate-limiter slot does not count against it.
    """

    def __init__(self, calls_per_minute: int = 120, timeout: float | None = 10.0):
        self.rate_limiter = RateLimiter(calls_per_minute)
        self.timeout = timeout

    async def close(self) -> None:
        """Nothing to release; kept for lifecycle symmetry with other clients."""

    async def _call(self, fn, *args, **kwargs):
        await self.rate_limiter.acquire()
        return await asyncio.wait_for(
            asyncio.to_thread(fn, *args, **kwargs), self.timeout
        )

    @staticmethod
    def _load_info(symbol: str) -> dict[str, Any]:
        return yf.Ticker(symbol).info or {}

    @staticmethod
    def _load_history(symbol: str, period: str, interval: str) -> pd.DataFrame:
        return yf.Ticker(symbol).history(
            period=period, interval=interval, auto_adjust=False
        )

    async def fetch_quote(self, symbol: str) -> Quote | None:
        """
        Fetch the current quote for a symbol.

        Returns:
            Quote, or None if the symbol is unknown or the provider failed
        """
        try:
            info = await self._call(self._load_info, symbol)
        except Exception as e:
            logger.warning(f"Error fetching quote for {symbol}: {e}")
            return None

        quote = info_to_quote(symbol, info)
        if quote is None:
            logger.warning(f"No quote data for {symbol}")
        return quote

    async def fetch_history(
        self,
        symbol: str,
        period: str = "6mo",
        interval: str = "1d",
    ) -> list[PriceBar]:
        """
        Fetch historical bars for a symbol.

        Args:
            symbol: Ticker (e.g., "7203.T", "AAPL")
            period: Lookback period (1d, 5d, 1mo, 3mo, 6mo, 1y, 2y, 5y, max)
            interval: Bar size; only 1d, 1wk and 1mo are honoured

        Returns:
            Bars ascending by date, or an empty list on error
        """
        period = normalize_period(period)
        interval = normalize_interval(interval)
        try:
            df = await self._call(self._load_history, symbol, period, interval)
        except Exception as e:
            logger.warning(f"Error fetching history for {symbol}: {e}")
            return []

        return frame_to_bars(df)
