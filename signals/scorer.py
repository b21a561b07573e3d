"""Rule-based signal scorer over market, liquidation and sentiment inputs."""
import logging

from models.enums import (
    TrendDirection, Breakout, Crossover, LiquidationSpike, Sentiment, SignalCategory,
)
from models.signals import Signal

logger = logging.getLogger("signalscan.scorer")

# Funding thresholds are in percent (0.01 == 0.01%)
FUNDING_BULLISH_BELOW = -0.01
FUNDING_BEARISH_ABOVE = 0.01
FUNDING_OVERHEATED_ABOVE = 0.02
RATIO_BULLISH_BELOW = 0.8
RATIO_BEARISH_ABOVE = 1.2
LIQ_RATIO_BULLISH_BELOW = 0.5
LIQ_RATIO_BEARISH_ABOVE = 2.0

SENTIMENT_ADJUSTMENT = 10
REVERSAL_ACTION_ABOVE = 70
CONTINUATION_ACTION_ABOVE = 60
WAIT_ACTION = "No clear direction. Wait for better setup."


class SignalScorer:
    """Counts eight bullish and eight bearish criteria and maps them to a category.

    Pure: the same snapshots and sentiment always produce the same Signal.
    """

    def bullish_criteria(self, market, liquidation):
        liq_ratio = liquidation.long_short_ratio
        return [
            (market.trend_5m == TrendDirection.LONG, "5min uptrend active"),
            (market.trend_15m == TrendDirection.LONG, "15min uptrend active"),
            (market.breakout == Breakout.UP, "Bollinger upper band breakout"),
            (market.crossover == Crossover.BULLISH, "EMA bullish crossover"),
            (market.funding_rate < FUNDING_BULLISH_BELOW, "Negative funding rate (shorts paying)"),
            (market.long_short_ratio < RATIO_BULLISH_BELOW, "Shorts outnumber longs"),
            (liquidation.spike == LiquidationSpike.SHORT, "Short liquidation spike detected"),
            (liq_ratio < LIQ_RATIO_BULLISH_BELOW, "Short liquidations dominate the last hour"),
        ]

    def bearish_criteria(self, market, liquidation):
        liq_ratio = liquidation.long_short_ratio
        return [
            (market.trend_5m == TrendDirection.SHORT, "5min downtrend active"),
            (market.trend_15m == TrendDirection.SHORT, "15min downtrend active"),
            (market.breakout == Breakout.DOWN, "Bollinger lower band breakout"),
            (market.crossover == Crossover.BEARISH, "EMA bearish crossover"),
            (market.funding_rate > FUNDING_BEARISH_ABOVE, "Positive funding rate (longs paying)"),
            (market.long_short_ratio > RATIO_BEARISH_ABOVE, "Longs outnumber shorts"),
            (liquidation.spike == LiquidationSpike.LONG, "Long liquidation spike detected"),
            (liq_ratio > LIQ_RATIO_BEARISH_ABOVE, "Long liquidations dominate the last hour"),
        ]

    @staticmethod
    def categorize(bull_count, bear_count):
        """Return (category, base confidence); first matching rule wins."""
        if bull_count >= 5:
            return SignalCategory.REVERSAL_LONG, min(95, 60 + 5 * bull_count)
        if bull_count >= 3:
            return SignalCategory.LONG_GOING, min(85, 50 + 7 * bull_count)
        if bear_count >= 5:
            return SignalCategory.REVERSAL_SHORT, min(95, 60 + 5 * bear_count)
        if bear_count >= 3:
            return SignalCategory.SHORT_GOING, min(85, 50 + 7 * bear_count)
        if bull_count == 2:
            return SignalCategory.SHORT_RISKY, 40
        if bear_count == 2:
            return SignalCategory.LONG_RISKY, 40
        return SignalCategory.NO_SIGNAL, 0

    @staticmethod
    def adjust_for_sentiment(category, confidence, sentiment):
        if sentiment == Sentiment.BULLISH:
            if category.implies_long:
                confidence += SENTIMENT_ADJUSTMENT
            if category.implies_short:
                confidence -= SENTIMENT_ADJUSTMENT
        elif sentiment == Sentiment.BEARISH:
            if category.implies_short:
                confidence += SENTIMENT_ADJUSTMENT
            if category.implies_long:
                confidence -= SENTIMENT_ADJUSTMENT
        return max(0, min(100, confidence))

    @staticmethod
    def suggested_action(category, confidence):
        side = "LONG" if category.implies_long else "SHORT"
        if category.is_reversal and confidence > REVERSAL_ACTION_ABOVE:
            return f"High confidence {side} setup. Consider entry with tight stop loss."
        if category.is_continuation and confidence > CONTINUATION_ACTION_ABOVE:
            return f"Trend continuation {side}. Follow trend with proper risk management."
        if category.is_risky:
            return f"{side.capitalize()} positions risky today. Consider opposite direction or wait."
        return WAIT_ACTION

    def score(self, market, liquidation, sentiment=Sentiment.NEUTRAL):
        bullish = self.bullish_criteria(market, liquidation)
        bearish = self.bearish_criteria(market, liquidation)
        bull_count = sum(1 for hit, _ in bullish if hit)
        bear_count = sum(1 for hit, _ in bearish if hit)

        category, confidence = self.categorize(bull_count, bear_count)
        confidence = self.adjust_for_sentiment(category, confidence, sentiment)

        logger.debug(f"{market.symbol}: bull={bull_count} bear={bear_count} -> "
                     f"{category.value} ({confidence})")

        return Signal(
            symbol=market.symbol,
            current_price=market.current_price,
            category=category,
            confidence=int(confidence),
            trend_summary=[fact for hit, fact in bullish + bearish if hit],
            suggested_action=self.suggested_action(category, confidence),
        )


def market_commentary(market, liquidation, sentiment=Sentiment.NEUTRAL):
    """Plain-language read of the inputs behind a signal."""
    notes = []

    if market.trend_5m == TrendDirection.LONG and market.trend_15m == TrendDirection.LONG:
        notes.append("Strong bullish technical momentum across multiple timeframes")
    elif market.trend_5m == TrendDirection.SHORT and market.trend_15m == TrendDirection.SHORT:
        notes.append("Bearish momentum confirmed on both 5min and 15min charts")
    if market.crossover == Crossover.BULLISH:
        notes.append("EMA crossover indicates potential upward breakout")
    elif market.crossover == Crossover.BEARISH:
        notes.append("EMA crossover points to weakening price action")
    if market.breakout == Breakout.UP:
        notes.append("Price breaking above Bollinger upper band suggests continuation")
    elif market.breakout == Breakout.DOWN:
        notes.append("Price breaking below Bollinger lower band signals selling pressure")

    liq_ratio = liquidation.long_short_ratio
    if liquidation.spike == LiquidationSpike.SHORT and liq_ratio < LIQ_RATIO_BULLISH_BELOW:
        notes.append("Massive short liquidations may fuel upward price movement")
    elif liquidation.spike == LiquidationSpike.LONG and liq_ratio > LIQ_RATIO_BEARISH_ABOVE:
        notes.append("Long liquidation cascade may continue downward pressure")

    if market.funding_rate < FUNDING_BULLISH_BELOW:
        notes.append("Negative funding rate shows shorts paying longs - bullish setup")
    elif market.funding_rate > FUNDING_OVERHEATED_ABOVE:
        notes.append("High positive funding rate shows overheated longs - potential reversal")

    if sentiment == Sentiment.BULLISH:
        notes.append("Market sentiment is bullish based on recent news")
    elif sentiment == Sentiment.BEARISH:
        notes.append("Market sentiment is bearish, suggesting cautious approach")

    if not notes:
        return "Mixed signals - recommend waiting for clearer direction before taking positions"
    return ". ".join(notes)
