"""Daily-bar buy and sell signal rules.

Buy rules, first match wins:
- Golden cross (MA5 over MA20) while the ten-bar trend is up
- Rebound: two falling closes followed by two rising closes
- Volume surge: last two bars average > 1.5x the first two (5-bar window)

Sell rules, first match wins:
- Dead cross (MA5 under MA20) while the ten-bar trend is down
- Peak: >10% ten-bar gain and each of the last two steps rose at most 1%
- Volume fade: last two bars average < 0.7x the first two, trend up

The peak rule bounds both steps by the same 1% tolerance. It is looser than
a rule that requires the last close not to exceed the previous one
(c2 <= c1 and c1 <= c0 * 1.01): a stall such as 130, 130.5, 130.9 is a peak
here and would not be under the stricter rule, so the two can disagree on
slow final climbs.

All thresholds are fixed. This module is pure business logic with no I/O.
"""

import logging
from typing import Sequence

from core.indicators import dead_cross, golden_cross, moving_average, recent_trend
from core.models import PriceBar, Quote, SignalReason, SignalResult, Trend

logger = logging.getLogger(__name__)

MIN_BARS = 10
SHORT_MA_PERIOD = 5
LONG_MA_PERIOD = 20

PATTERN_WINDOW = 5
VOLUME_SURGE_RATIO = 1.5
VOLUME_FADE_RATIO = 0.7

PEAK_WINDOW = 10
PEAK_MIN_GAIN = 0.10
PEAK_MAX_STEP = 1.01

# Screener weight per buy reason
BUY_SCORES: dict[SignalReason, int] = {
    SignalReason.GOLDEN_CROSS_UPTREND: 3,
    SignalReason.REBOUND_AFTER_DECLINE: 2,
    SignalReason.VOLUME_SURGE: 1,
}


def _has_enough_data(quote: Quote | None, bars: Sequence[PriceBar]) -> bool:
    return quote is not None and len(bars) >= MIN_BARS


def _volume_halves(bars: Sequence[PriceBar]) -> tuple[float, float] | None:
    """Average volume of the first two and last two bars of the 5-bar window."""
    if len(bars) < PATTERN_WINDOW:
        return None

    window = bars[-PATTERN_WINDOW:]
    before = (window[0].volume + window[1].volume) / 2
    after = (window[3].volume + window[4].volume) / 2
    return before, after


def is_volume_increasing(bars: Sequence[PriceBar]) -> bool:
    halves = _volume_halves(bars)
    if halves is None:
        return False
    before, after = halves
    return after > before * VOLUME_SURGE_RATIO


def is_volume_decreasing(bars: Sequence[PriceBar]) -> bool:
    halves = _volume_halves(bars)
    if halves is None:
        return False
    before, after = halves
    return after < before * VOLUME_FADE_RATIO


def is_price_rebounding(bars: Sequence[PriceBar]) -> bool:
    """Two falling closes (bars 0-2) then two rising closes (bars 2-4)."""
    if len(bars) < PATTERN_WINDOW:
        return False

    window = bars[-PATTERN_WINDOW:]
    down_days = 0
    for i in range(1, 3):
        if window[i].close < window[i - 1].close:
            down_days += 1

    return (
        down_days >= 2
        and window[3].close > window[2].close
        and window[4].close > window[3].close
    )


def is_price_peaking(bars: Sequence[PriceBar]) -> bool:
    """Sharp ten-bar rally whose last two steps have stalled."""
    if len(bars) < PEAK_WINDOW:
        return False

    window = bars[-PEAK_WINDOW:]
    first = window[0].close
    if first <= 0:
        return False
    gain = (window[-1].close - first) / first

    c0, c1, c2 = (b.close for b in window[-3:])
    slowing = c1 <= c0 * PEAK_MAX_STEP and c2 <= c1 * PEAK_MAX_STEP

    return gain > PEAK_MIN_GAIN and slowing


def evaluate_buy(quote: Quote | None, bars: Sequence[PriceBar]) -> SignalResult:
    """Decide whether the series shows a buy signal.

    Args:
        quote: Current quote; None means the symbol could not be fetched.
        bars: Daily bars, ascending by date.

    Returns:
        SignalResult with the reason of the first matching rule.
    """
    if not _has_enough_data(quote, bars):
        return SignalResult(is_signal=False, reason=SignalReason.INSUFFICIENT_DATA)

    short_ma = moving_average(bars, SHORT_MA_PERIOD)
    long_ma = moving_average(bars, LONG_MA_PERIOD)
    trend = recent_trend(bars)

    if trend == Trend.UP and golden_cross(short_ma, long_ma):
        reason = SignalReason.GOLDEN_CROSS_UPTREND
    elif is_price_rebounding(bars):
        reason = SignalReason.REBOUND_AFTER_DECLINE
    elif is_volume_increasing(bars):
        reason = SignalReason.VOLUME_SURGE
    else:
        return SignalResult(is_signal=False, reason=SignalReason.NO_BUY_SIGNAL)

    logger.debug(f"Buy signal for {quote.symbol}: {reason.value}")
    return SignalResult(is_signal=True, reason=reason)


def evaluate_sell(quote: Quote | None, bars: Sequence[PriceBar]) -> SignalResult:
    """Decide whether the series shows a sell signal.

    Independent of the buy evaluation; same preconditions.
    """
    if not _has_enough_data(quote, bars):
        return SignalResult(is_signal=False, reason=SignalReason.INSUFFICIENT_DATA)

    short_ma = moving_average(bars, SHORT_MA_PERIOD)
    long_ma = moving_average(bars, LONG_MA_PERIOD)
    trend = recent_trend(bars)

    if trend == Trend.DOWN and dead_cross(short_ma, long_ma):
        reason = SignalReason.DEAD_CROSS_DOWNTREND
    elif is_price_peaking(bars):
        reason = SignalReason.PEAK_AFTER_RALLY
    elif is_volume_decreasing(bars) and trend == Trend.UP:
        reason = SignalReason.VOLUME_FADE_UPTREND
    else:
        return SignalResult(is_signal=False, reason=SignalReason.NO_SELL_SIGNAL)

    logger.debug(f"Sell signal for {quote.symbol}: {reason.value}")
    return SignalResult(is_signal=True, reason=reason)


def buy_score(result: SignalResult) -> int:
    """Screener score of a buy evaluation (0 when there is no signal)."""
    if not result.is_signal:
        return 0
    return BUY_SCORES.get(result.reason, 0)
