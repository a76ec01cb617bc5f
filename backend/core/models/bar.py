"""Daily price bar and quote snapshot models."""

import datetime as dt
from typing import Sequence

from pydantic import ConfigDict, Field

from core.models.base import CamelModel


class PriceBar(CamelModel):
    """One daily OHLCV bar."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    open: float = Field(ge=0)
    high: float = Field(ge=0)
    low: float = Field(ge=0)
    close: float = Field(ge=0)
    volume: float = Field(ge=0)


class Quote(CamelModel):
    """Snapshot of current market state for one symbol.

    Refreshed on every request and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str = ""
    price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    previous_close: float = 0.0
    open: float = 0.0
    day_high: float = 0.0
    day_low: float = 0.0
    volume: float = 0.0
    average_volume: float = 0.0
    market_cap: float = 0.0


def closes(bars: Sequence[PriceBar]) -> list[float]:
    """Get list of close prices."""
    return [b.close for b in bars]
