"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    TREND_MARGIN,
    TREND_WINDOW,
    count_moves,
    dead_cross,
    golden_cross,
    moving_average,
    recent_trend,
)

__all__ = [
    "TREND_MARGIN",
    "TREND_WINDOW",
    "count_moves",
    "dead_cross",
    "golden_cross",
    "moving_average",
    "recent_trend",
]
