"""Technical indicators over a closing-price window.

All functions are pure: the same sequence always yields the same label.
"""
import math

from models.enums import TrendDirection, Breakout, Crossover

TREND_MIN_POINTS = 10
TREND_THRESHOLD = 0.002  # 0.2% move between consecutive 5-bar means
BAND_MIN_POINTS = 20
CROSSOVER_MIN_POINTS = 20


def closes_from_klines(klines):
    """Extract closing prices (column 4) from exchange kline rows, skipping malformed rows."""
    closes = []
    for row in klines or []:
        try:
            close = float(row[4])
        except (IndexError, TypeError, ValueError):
            continue
        if math.isfinite(close):
            closes.append(close)
    return closes


def _mean(values):
    return sum(values) / len(values)


def trend(prices, window=20):
    """Compare the mean of the last 5 closes to the 5 before them."""
    prices = list(prices)[-window:]
    if len(prices) < TREND_MIN_POINTS:
        return TrendDirection.NEUTRAL

    recent = _mean(prices[-5:])
    previous = _mean(prices[-10:-5])
    if previous == 0:
        return TrendDirection.NEUTRAL

    change = (recent - previous) / previous
    if change > TREND_THRESHOLD:
        return TrendDirection.LONG
    if change < -TREND_THRESHOLD:
        return TrendDirection.SHORT
    return TrendDirection.NEUTRAL


def volatility_breakout(prices, period=20, deviations=2.0):
    """Bollinger-style band breakout using population standard deviation."""
    prices = list(prices)
    if len(prices) < BAND_MIN_POINTS:
        return Breakout.NONE

    window = prices[-period:]
    sma = _mean(window)
    variance = sum((p - sma) ** 2 for p in window) / len(window)
    std_dev = math.sqrt(variance)

    upper = sma + std_dev * deviations
    lower = sma - std_dev * deviations
    current = window[-1]

    if current > upper:
        return Breakout.UP
    if current < lower:
        return Breakout.DOWN
    return Breakout.NONE


def ema(prices, period):
    """Exponential moving average series seeded with the first price."""
    prices = list(prices)
    if not prices:
        return []
    multiplier = 2 / (period + 1)
    series = [prices[0]]
    for price in prices[1:]:
        series.append((price - series[-1]) * multiplier + series[-1])
    return series


def crossover(prices, fast=9, slow=21):
    """Detect a fast/slow EMA cross between the last two samples."""
    prices = list(prices)
    if len(prices) < CROSSOVER_MIN_POINTS:
        return Crossover.NONE

    fast_ema = ema(prices, fast)
    slow_ema = ema(prices, slow)
    prev_fast, curr_fast = fast_ema[-2], fast_ema[-1]
    prev_slow, curr_slow = slow_ema[-2], slow_ema[-1]

    if prev_fast <= prev_slow and curr_fast > curr_slow:
        return Crossover.BULLISH
    if prev_fast >= prev_slow and curr_fast < curr_slow:
        return Crossover.BEARISH
    return Crossover.NONE
