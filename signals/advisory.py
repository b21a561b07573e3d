"""Advisory validation of scored signals.

The provider is asked for a fixed JSON shape::

    {
      "signalValidation": {"isValid", "confidence", "reasoning", "suggestedAction"},
      "newsAnalysis": {"overallSentiment", "marketContext"},
      "riskAssessment": {"level", "factors", "warnings"}
    }

Anything that cannot be read into that shape falls back to a local verdict
derived from the signal's own confidence.
"""
import json
import logging

from models.enums import Sentiment, RiskLevel
from models.signals import AdvisoryAnalysis

logger = logging.getLogger("signalscan.advisory")

VALID_CONFIDENCE = 70

SYSTEM_PROMPT = (
    "You are an expert cryptocurrency trading analyst. "
    "Provide accurate, concise analysis in valid JSON format only."
)

RESPONSE_SHAPE = """{
  "signalValidation": {
    "isValid": boolean,
    "confidence": number (0-100),
    "reasoning": "detailed explanation",
    "suggestedAction": "specific trading advice"
  },
  "newsAnalysis": {
    "overallSentiment": "BULLISH|BEARISH|NEUTRAL",
    "marketContext": "market context explanation"
  },
  "riskAssessment": {
    "level": "LOW|MEDIUM|HIGH|EXTREME",
    "factors": ["risk factor 1", "risk factor 2"],
    "warnings": ["warning 1", "warning 2"]
  }
}"""


class MalformedAdvisoryResponse(ValueError):
    """Provider reply is not JSON or does not match the expected shape."""


def build_prompt(signal, market, liquidation, news):
    news_lines = "\n".join(f"- {n.title}: {n.summary}" for n in news) or "- No recent news"
    return f"""As a professional crypto trading analyst, analyze this trading signal and provide validation:

COIN: {signal.symbol}
CURRENT PRICE: ${signal.current_price:,}
SIGNAL: {signal.category.value}
CONFIDENCE: {signal.confidence}%

TECHNICAL DATA:
- 24h Change: {market.delta_volume:.2f}%
- Volume: {market.volume:,.0f}
- Funding Rate: {market.funding_rate:.4f}%
- Long/Short Ratio: {market.long_short_ratio:.2f}
- 5min Trend: {market.trend_5m.value}
- 15min Trend: {market.trend_15m.value}
- Bollinger Breakout: {market.breakout.value}
- EMA Crossover: {market.crossover.value}

LIQUIDATION DATA:
- 1h Liquidations: ${liquidation.total_1h:,.0f}
- Long Liquidations: ${liquidation.long_1h:,.0f}
- Short Liquidations: ${liquidation.short_1h:,.0f}
- Liquidation Spike: {liquidation.spike.value}

RECENT NEWS:
{news_lines}

Provide analysis in this JSON format:
{RESPONSE_SHAPE}
"""


def _section(data, key):
    section = data.get(key)
    if not isinstance(section, dict):
        raise MalformedAdvisoryResponse(f"Missing or invalid '{key}' section")
    return section


def _string_list(value, key):
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedAdvisoryResponse(f"'{key}' must be a list")
    return [str(v) for v in value]


def parse_advisory(content):
    """Read a provider reply into an AdvisoryAnalysis (without news attached)."""
    try:
        data = json.loads(content)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedAdvisoryResponse(f"Reply is not JSON: {e}")
    if not isinstance(data, dict):
        raise MalformedAdvisoryResponse("Reply is not a JSON object")

    validation = _section(data, "signalValidation")
    news_analysis = data.get("newsAnalysis") or {}
    risk = _section(data, "riskAssessment")

    is_valid = validation.get("isValid")
    if not isinstance(is_valid, bool):
        raise MalformedAdvisoryResponse("'isValid' must be a boolean")

    confidence = validation.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise MalformedAdvisoryResponse("'confidence' must be a number")

    try:
        risk_level = RiskLevel(str(risk.get("level", "")).upper())
    except ValueError:
        raise MalformedAdvisoryResponse(f"Unknown risk level {risk.get('level')!r}")

    try:
        sentiment = Sentiment(str(news_analysis.get("overallSentiment", "NEUTRAL")).upper())
    except ValueError:
        sentiment = Sentiment.NEUTRAL

    return AdvisoryAnalysis(
        is_valid=is_valid,
        confidence=int(max(0, min(100, confidence))),
        reasoning=str(validation.get("reasoning", "")),
        suggested_action=str(validation.get("suggestedAction", "")),
        overall_sentiment=sentiment,
        market_context=str(news_analysis.get("marketContext", "")),
        risk_level=risk_level,
        risk_factors=_string_list(risk.get("factors"), "factors"),
        warnings=_string_list(risk.get("warnings"), "warnings"),
    )


def fallback_analysis(signal, news):
    """Local verdict from the signal's own confidence."""
    confidence = signal.confidence
    if confidence < 50:
        risk_level = RiskLevel.HIGH
    elif confidence < VALID_CONFIDENCE:
        risk_level = RiskLevel.MEDIUM
    else:
        risk_level = RiskLevel.LOW

    return AdvisoryAnalysis(
        is_valid=confidence >= VALID_CONFIDENCE,
        confidence=confidence,
        reasoning="Technical analysis based on price action and volume indicators",
        suggested_action=signal.suggested_action,
        overall_sentiment=Sentiment.NEUTRAL,
        market_context="Market sentiment analysis unavailable",
        risk_level=risk_level,
        risk_factors=["Technical indicators", "Market volatility"],
        warnings=["Low confidence signal"] if confidence < VALID_CONFIDENCE else [],
        key_news=list(news),
        source="fallback",
    )


class AdvisoryValidator:
    def __init__(self, provider=None, enabled=True):
        self.provider = provider
        self.enabled = enabled

    def is_enabled(self):
        return self.enabled and self.provider is not None and self.provider.is_available()

    async def validate(self, signal, market, liquidation, news):
        """Return None when advisory is off; never raises otherwise."""
        if not self.is_enabled():
            return None

        try:
            content = await self.provider.complete(
                SYSTEM_PROMPT,
                build_prompt(signal, market, liquidation, news),
                json_mode=True,
            )
            analysis = parse_advisory(content)
        except Exception as e:
            logger.warning(f"{signal.symbol}: advisory validation failed ({e}), using local verdict")
            return fallback_analysis(signal, news)

        analysis.key_news = list(news)
        return analysis
