"""Signal result models."""

from enum import Enum
from pydantic import ConfigDict, computed_field

from core.models.base import CamelModel


class Trend(str, Enum):
    """Direction of the recent ten-bar trend."""

    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class SignalReason(str, Enum):
    """Structured reason code for a buy or sell decision.

    The value is the stable code; ``message`` is the display text.
    """

    INSUFFICIENT_DATA = "insufficient_data"

    # Buy side
    GOLDEN_CROSS_UPTREND = "golden_cross_uptrend"
    REBOUND_AFTER_DECLINE = "rebound_after_decline"
    VOLUME_SURGE = "volume_surge"
    NO_BUY_SIGNAL = "no_buy_signal"

    # Sell side
    DEAD_CROSS_DOWNTREND = "dead_cross_downtrend"
    PEAK_AFTER_RALLY = "peak_after_rally"
    VOLUME_FADE_UPTREND = "volume_fade_uptrend"
    NO_SELL_SIGNAL = "no_sell_signal"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[SignalReason, str] = {
    SignalReason.INSUFFICIENT_DATA: "insufficient data",
    SignalReason.GOLDEN_CROSS_UPTREND: "golden cross in an uptrend",
    SignalReason.REBOUND_AFTER_DECLINE: "rebound after decline",
    SignalReason.VOLUME_SURGE: "rising volume indicates renewed interest",
    SignalReason.NO_BUY_SIGNAL: "no buy signal detected",
    SignalReason.DEAD_CROSS_DOWNTREND: "dead cross in a downtrend",
    SignalReason.PEAK_AFTER_RALLY: "reached a likely peak after a sharp rally",
    SignalReason.VOLUME_FADE_UPTREND: (
        "volume fading during an uptrend; upside momentum weakening"
    ),
    SignalReason.NO_SELL_SIGNAL: "no sell signal detected",
}


class SignalResult(CamelModel):
    """Outcome of one buy or sell evaluation.

    ``reason`` is always set, also when ``is_signal`` is False.
    """

    model_config = ConfigDict(frozen=True)

    is_signal: bool
    reason: SignalReason

    @computed_field
    @property
    def message(self) -> str:
        return self.reason.message
