"""Tests for the rule-based signal scorer."""
from dataclasses import replace

import pytest

from models.enums import (
    TrendDirection, Breakout, Crossover, LiquidationSpike, Sentiment, SignalCategory,
)
from models.market import LiquidationSnapshot
from signals.scorer import SignalScorer, market_commentary


@pytest.fixture
def scorer():
    return SignalScorer()


def test_six_bullish_criteria_is_reversal_long(scorer, bullish_market, balanced_liquidation):
    signal = scorer.score(bullish_market, balanced_liquidation, Sentiment.NEUTRAL)
    assert signal.category == SignalCategory.REVERSAL_LONG
    assert signal.confidence == 90
    assert signal.category.value == "REVERSAL STARTED – LONG"


def test_reversal_confidence_capped_at_95(scorer, bullish_market):
    liq = LiquidationSnapshot(symbol="BTCUSDT", long_1h=100_000, short_1h=3_000_000,
                              spike=LiquidationSpike.SHORT)
    signal = scorer.score(bullish_market, liq, Sentiment.NEUTRAL)
    assert signal.category == SignalCategory.REVERSAL_LONG
    assert signal.confidence == 95


def test_three_bullish_is_long_going(scorer, neutral_market, balanced_liquidation):
    market = replace(neutral_market, trend_5m=TrendDirection.LONG, trend_15m=TrendDirection.LONG,
                     breakout=Breakout.UP)
    signal = scorer.score(market, balanced_liquidation)
    assert signal.category == SignalCategory.LONG_GOING
    assert signal.confidence == 71


def test_bullish_priority_over_bearish(scorer, neutral_market, balanced_liquidation):
    # Three bullish and five bearish: LONG GOING is checked before REVERSAL SHORT
    market = replace(neutral_market, trend_5m=TrendDirection.LONG, trend_15m=TrendDirection.LONG,
                     breakout=Breakout.UP, crossover=Crossover.BEARISH, funding_rate=0.05,
                     long_short_ratio=1.5)
    liq = replace(balanced_liquidation, long_1h=2_000_000, short_1h=400_000,
                  spike=LiquidationSpike.LONG)
    signal = scorer.score(market, liq)
    assert signal.category == SignalCategory.LONG_GOING


def test_five_bearish_is_reversal_short(scorer, neutral_market, balanced_liquidation):
    market = replace(neutral_market, trend_5m=TrendDirection.SHORT, trend_15m=TrendDirection.SHORT,
                     breakout=Breakout.DOWN, crossover=Crossover.BEARISH, funding_rate=0.03)
    signal = scorer.score(market, balanced_liquidation)
    assert signal.category == SignalCategory.REVERSAL_SHORT
    assert signal.confidence == 85


def test_three_bearish_is_short_going(scorer, neutral_market, balanced_liquidation):
    market = replace(neutral_market, trend_5m=TrendDirection.SHORT, breakout=Breakout.DOWN,
                     long_short_ratio=1.3)
    signal = scorer.score(market, balanced_liquidation)
    assert signal.category == SignalCategory.SHORT_GOING
    assert signal.confidence == 71


def test_two_bullish_is_short_risky(scorer, neutral_market, balanced_liquidation):
    market = replace(neutral_market, trend_5m=TrendDirection.LONG, crossover=Crossover.BULLISH)
    signal = scorer.score(market, balanced_liquidation)
    assert signal.category == SignalCategory.SHORT_RISKY
    assert signal.confidence == 40
    assert signal.suggested_action.startswith("Short positions risky today")


def test_two_bearish_is_long_risky(scorer, neutral_market, balanced_liquidation):
    market = replace(neutral_market, trend_15m=TrendDirection.SHORT, funding_rate=0.05)
    signal = scorer.score(market, balanced_liquidation)
    assert signal.category == SignalCategory.LONG_RISKY
    assert signal.suggested_action.startswith("Long positions risky today")


def test_no_signal(scorer, neutral_market, balanced_liquidation):
    signal = scorer.score(neutral_market, balanced_liquidation)
    assert signal.category == SignalCategory.NO_SIGNAL
    assert signal.confidence == 0
    assert signal.trend_summary == []
    assert signal.suggested_action == "No clear direction. Wait for better setup."


def test_empty_liquidations_count_as_bullish_ratio(scorer, neutral_market):
    # 0 / max(0, 1) == 0 < 0.5
    signal = scorer.score(neutral_market, LiquidationSnapshot(symbol="ETHUSDT"))
    assert signal.trend_summary == ["Short liquidations dominate the last hour"]


@pytest.mark.parametrize("sentiment,expected", [
    (Sentiment.BULLISH, 100),
    (Sentiment.BEARISH, 80),
    (Sentiment.NEUTRAL, 90),
])
def test_sentiment_adjustment_on_long(scorer, bullish_market, balanced_liquidation, sentiment, expected):
    assert scorer.score(bullish_market, balanced_liquidation, sentiment).confidence == expected


def test_sentiment_adjustment_clamped_at_zero(scorer):
    assert SignalScorer.adjust_for_sentiment(SignalCategory.SHORT_RISKY, 5, Sentiment.BULLISH) == 0


def test_no_signal_unaffected_by_sentiment(scorer, neutral_market, balanced_liquidation):
    assert scorer.score(neutral_market, balanced_liquidation, Sentiment.BULLISH).confidence == 0


def test_trend_summary_bullish_then_bearish(scorer, neutral_market, balanced_liquidation):
    market = replace(neutral_market, trend_5m=TrendDirection.LONG, trend_15m=TrendDirection.SHORT)
    signal = scorer.score(market, balanced_liquidation)
    assert signal.trend_summary == ["5min uptrend active", "15min downtrend active"]


def test_action_wording_thresholds(scorer):
    assert SignalScorer.suggested_action(SignalCategory.REVERSAL_LONG, 75).startswith("High confidence LONG")
    assert SignalScorer.suggested_action(SignalCategory.REVERSAL_SHORT, 70).startswith("No clear direction")
    assert SignalScorer.suggested_action(SignalCategory.SHORT_GOING, 61).startswith("Trend continuation SHORT")
    assert SignalScorer.suggested_action(SignalCategory.LONG_GOING, 60).startswith("No clear direction")


def test_scorer_is_idempotent(scorer, bullish_market, balanced_liquidation):
    first = scorer.score(bullish_market, balanced_liquidation, Sentiment.BULLISH)
    second = scorer.score(bullish_market, balanced_liquidation, Sentiment.BULLISH)
    assert first == second


def test_confidence_always_in_range(scorer, neutral_market, balanced_liquidation):
    trends = [TrendDirection.LONG, TrendDirection.SHORT, TrendDirection.NEUTRAL]
    for t5 in trends:
        for t15 in trends:
            for sentiment in Sentiment:
                market = replace(neutral_market, trend_5m=t5, trend_15m=t15)
                signal = scorer.score(market, balanced_liquidation, sentiment)
                assert 0 <= signal.confidence <= 100
                assert signal.category in SignalCategory


def test_market_commentary_mixed(neutral_market, balanced_liquidation):
    text = market_commentary(neutral_market, balanced_liquidation, Sentiment.NEUTRAL)
    assert text.startswith("Mixed signals")


def test_market_commentary_bullish(bullish_market, balanced_liquidation):
    text = market_commentary(bullish_market, balanced_liquidation, Sentiment.BULLISH)
    assert "multiple timeframes" in text
    assert "shorts paying longs" in text
    assert "sentiment is bullish" in text
