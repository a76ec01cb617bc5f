"""Signal rules over daily bars."""

from core.strategy.trend_signals import (
    BUY_SCORES,
    MIN_BARS,
    buy_score,
    evaluate_buy,
    evaluate_sell,
    is_price_peaking,
    is_price_rebounding,
    is_volume_decreasing,
    is_volume_increasing,
)

__all__ = [
    "BUY_SCORES",
    "MIN_BARS",
    "buy_score",
    "evaluate_buy",
    "evaluate_sell",
    "is_price_peaking",
    "is_price_rebounding",
    "is_volume_decreasing",
    "is_volume_increasing",
]
