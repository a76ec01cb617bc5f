"""Domain models (pure data, no I/O)."""

from core.models.base import CamelModel
from core.models.bar import PriceBar, Quote, closes
from core.models.signal import SignalReason, SignalResult, Trend
from core.models.portfolio import (
    Holding,
    Portfolio,
    PortfolioValuation,
    ScreenerEntry,
    SellSignalEntry,
    StockAnalysis,
    ValuationRow,
)

__all__ = [
    "CamelModel",
    "PriceBar",
    "Quote",
    "closes",
    "SignalReason",
    "SignalResult",
    "Trend",
    "Holding",
    "Portfolio",
    "PortfolioValuation",
    "ScreenerEntry",
    "SellSignalEntry",
    "StockAnalysis",
    "ValuationRow",
]
