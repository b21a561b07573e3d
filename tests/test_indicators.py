"""Tests for the indicator engine."""
from models.enums import TrendDirection, Breakout, Crossover
from monitor import indicators


def test_trend_needs_ten_points():
    assert indicators.trend([100, 101, 102, 103, 104, 105, 106, 107, 108]) == TrendDirection.NEUTRAL


def test_trend_long_when_recent_mean_rises():
    prices = [100.0] * 15 + [101.0] * 5  # +1% between 5-bar means
    assert indicators.trend(prices) == TrendDirection.LONG


def test_trend_short_when_recent_mean_falls():
    prices = [100.0] * 15 + [99.0] * 5
    assert indicators.trend(prices) == TrendDirection.SHORT


def test_trend_neutral_within_threshold():
    prices = [100.0] * 15 + [100.1] * 5  # +0.1%
    assert indicators.trend(prices) == TrendDirection.NEUTRAL


def test_trend_uses_last_window_only():
    # Early crash falls outside the 20-point window
    prices = [10.0] * 10 + [100.0] * 15 + [101.0] * 5
    assert indicators.trend(prices) == TrendDirection.LONG


def test_trend_is_pure():
    prices = [100 + (i % 3) for i in range(30)]
    assert indicators.trend(prices) == indicators.trend(list(prices))


def test_trend_zero_baseline_is_neutral():
    assert indicators.trend([0.0] * 15 + [1.0] * 5) == TrendDirection.NEUTRAL


def test_breakout_needs_twenty_points():
    assert indicators.volatility_breakout([100.0] * 18 + [200.0]) == Breakout.NONE


def test_breakout_up_on_outlier_close():
    assert indicators.volatility_breakout([100.0] * 19 + [110.0]) == Breakout.UP


def test_breakout_down_on_outlier_close():
    assert indicators.volatility_breakout([100.0] * 19 + [90.0]) == Breakout.DOWN


def test_breakout_none_inside_band():
    prices = [100.0, 101.0] * 10
    assert indicators.volatility_breakout(prices) == Breakout.NONE


def test_ema_seeded_with_first_price():
    series = indicators.ema([10.0, 20.0], period=3)
    assert series[0] == 10.0
    assert series[1] == 15.0  # multiplier 2/(3+1) = 0.5


def test_ema_empty():
    assert indicators.ema([], 9) == []


def test_crossover_needs_twenty_points():
    assert indicators.crossover([100.0] * 19) == Crossover.NONE


def test_crossover_bullish_on_sharp_last_bar_rally():
    prices = [100.0 - i * 0.5 for i in range(24)] + [140.0]
    assert indicators.crossover(prices) == Crossover.BULLISH


def test_crossover_bearish_on_sharp_last_bar_drop():
    prices = [100.0 + i * 0.5 for i in range(24)] + [60.0]
    assert indicators.crossover(prices) == Crossover.BEARISH


def test_crossover_none_on_flat_series():
    assert indicators.crossover([100.0] * 30) == Crossover.NONE


def test_closes_from_klines_skips_malformed_rows():
    rows = [[0, "1", "1", "1", "101.5"], [1, "1"], None, [2, "1", "1", "1", "abc"], [3, 0, 0, 0, "nan"]]
    assert indicators.closes_from_klines(rows) == [101.5]
