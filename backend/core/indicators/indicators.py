"""Series statistics for signal generation.

Moving averages, recent-trend classification and crossover detection over
an ascending-by-date sequence of daily bars. Pure math, no I/O.
"""

from typing import Sequence

import numpy as np

from core.models import PriceBar, Trend, closes

# Number of trailing bars used for trend classification
TREND_WINDOW = 10
# Up/down day counts must differ by more than this to call a trend
TREND_MARGIN = 2


def moving_average(bars: Sequence[PriceBar], period: int) -> list[float]:
    """Calculate the trailing simple moving average of close prices.

    Returns a list the same length as ``bars``. Index ``i < period - 1`` holds
    the sentinel 0.0 (window not yet full); every other index holds the mean
    of the ``period`` closes ending at ``i``.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    arr = np.array(closes(bars), dtype=np.float64)
    result = np.zeros_like(arr)

    for i in range(period - 1, len(arr)):
        result[i] = np.mean(arr[i - period + 1 : i + 1])

    return [float(v) for v in result]


def count_moves(bars: Sequence[PriceBar]) -> tuple[int, int]:
    """Count strictly rising and strictly falling close-to-close transitions.

    Flat transitions count toward neither.
    """
    up_days = 0
    down_days = 0
    for prev, cur in zip(bars, bars[1:]):
        if cur.close > prev.close:
            up_days += 1
        elif cur.close < prev.close:
            down_days += 1
    return up_days, down_days


def recent_trend(bars: Sequence[PriceBar]) -> Trend:
    """Classify the trend over the final ten bars.

    Fewer than ten bars is always neutral.
    """
    if len(bars) < TREND_WINDOW:
        return Trend.NEUTRAL

    up_days, down_days = count_moves(bars[-TREND_WINDOW:])

    if up_days > down_days + TREND_MARGIN:
        return Trend.UP
    if down_days > up_days + TREND_MARGIN:
        return Trend.DOWN
    return Trend.NEUTRAL


def golden_cross(short_ma: Sequence[float], long_ma: Sequence[float]) -> bool:
    """Short MA crossed from at/below to above the long MA on the last bar."""
    if len(short_ma) < 2 or len(long_ma) < 2:
        return False

    return short_ma[-2] <= long_ma[-2] and short_ma[-1] > long_ma[-1]


def dead_cross(short_ma: Sequence[float], long_ma: Sequence[float]) -> bool:
    """Short MA crossed from at/above to below the long MA on the last bar."""
    if len(short_ma) < 2 or len(long_ma) < 2:
        return False

    return short_ma[-2] >= long_ma[-2] and short_ma[-1] < long_ma[-1]
