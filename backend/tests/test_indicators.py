"""Tests for series statistics."""

import pytest
from datetime import date, timedelta

from core.indicators import (
    count_moves,
    dead_cross,
    golden_cross,
    moving_average,
    recent_trend,
)
from core.models import PriceBar, Trend


def _bars(closes: list[float]) -> list[PriceBar]:
    """Create daily bars with the given closes."""
    start = date(2024, 1, 1)
    return [
        PriceBar(
            date=start + timedelta(days=i),
            open=c,
            high=c,
            low=c,
            close=c,
            volume=1000,
        )
        for i, c in enumerate(closes)
    ]


def _from_moves(moves: str, start: float = 100.0) -> list[PriceBar]:
    """Build bars from a move string: '+' up, '-' down, '=' flat."""
    closes = [start]
    for m in moves:
        step = {"+": 1.0, "-": -1.0, "=": 0.0}[m]
        closes.append(closes[-1] + step)
    return _bars(closes)


class TestMovingAverage:
    """Tests for the trailing simple moving average."""

    def test_basic(self):
        result = moving_average(_bars([float(i) for i in range(1, 11)]), 3)

        assert len(result) == 10
        assert result[0] == 0
        assert result[1] == 0
        # (1+2+3)/3
        assert result[2] == pytest.approx(2.0)
        # (8+9+10)/3
        assert result[9] == pytest.approx(9.0)

    @pytest.mark.parametrize("period", [1, 2, 5, 20, 50])
    def test_sentinel_before_window_is_full(self, period):
        bars = _bars([100.0 + i for i in range(30)])
        result = moving_average(bars, period)

        assert len(result) == len(bars)
        assert all(v == 0 for v in result[: period - 1])
        assert all(v > 0 for v in result[period - 1 :])

    def test_period_longer_than_series(self):
        result = moving_average(_bars([10.0, 11.0, 12.0]), 5)
        assert result == [0.0, 0.0, 0.0]

    def test_period_one_is_close(self):
        closes = [3.0, 1.5, 7.25]
        assert moving_average(_bars(closes), 1) == closes

    def test_empty_series(self):
        assert moving_average([], 5) == []

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            moving_average(_bars([1.0, 2.0]), 0)


class TestRecentTrend:
    """Tests for ten-bar trend classification."""

    def test_fewer_than_ten_bars_is_neutral(self):
        assert recent_trend(_from_moves("++++++++")) == Trend.NEUTRAL

    def test_all_rising_is_up(self):
        assert recent_trend(_from_moves("+++++++++")) == Trend.UP

    def test_all_falling_is_down(self):
        assert recent_trend(_from_moves("---------")) == Trend.DOWN

    def test_margin_must_be_exceeded(self):
        # 5 up, 3 down, 1 flat: 5 > 3 + 2 is false
        assert recent_trend(_from_moves("+++++---=")) == Trend.NEUTRAL
        # 6 up, 3 down: 6 > 5
        assert recent_trend(_from_moves("++++++---")) == Trend.UP
        # 6 down, 3 up
        assert recent_trend(_from_moves("------+++")) == Trend.DOWN

    def test_flat_moves_count_toward_neither(self):
        # 3 up, 0 down, 6 flat: 3 > 2
        assert recent_trend(_from_moves("+++======")) == Trend.UP
        # 2 up, 0 down: 2 > 2 is false
        assert recent_trend(_from_moves("++=======")) == Trend.NEUTRAL

    def test_only_last_ten_bars_used(self):
        # Long decline followed by ten bars rising
        bars = _from_moves("-" * 30 + "+" * 9)
        assert recent_trend(bars) == Trend.UP

    def test_count_moves(self):
        assert count_moves(_from_moves("+-=+")) == (2, 1)


class TestCrosses:
    """Tests for golden/dead cross detection on the last two elements."""

    def test_golden_cross(self):
        assert golden_cross([1.0, 2.0], [1.5, 1.5]) is True

    def test_golden_cross_from_equal(self):
        assert golden_cross([1.5, 2.0], [1.5, 1.5]) is True

    def test_no_golden_cross_when_already_above(self):
        assert golden_cross([2.0, 3.0], [1.0, 1.0]) is False

    def test_no_golden_cross_when_still_equal(self):
        assert golden_cross([1.0, 1.5], [1.0, 1.5]) is False

    def test_dead_cross(self):
        assert dead_cross([2.0, 1.0], [1.5, 1.5]) is True

    def test_dead_cross_from_equal(self):
        assert dead_cross([1.5, 1.0], [1.5, 1.5]) is True

    def test_no_dead_cross_when_already_below(self):
        assert dead_cross([1.0, 0.5], [2.0, 2.0]) is False

    def test_only_last_two_elements_matter(self):
        short = [5.0, 0.0, 1.0, 2.0]
        long = [1.0, 1.0, 1.5, 1.5]
        assert golden_cross(short, long) is True
        assert dead_cross(short, long) is False

    def test_too_short(self):
        assert golden_cross([1.0], [0.5]) is False
        assert dead_cross([], []) is False
