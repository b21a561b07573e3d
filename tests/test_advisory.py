"""Tests for the advisory provider and validator."""
import asyncio
import json

import pytest

from conftest import FakeChatClient, advisory_reply
from models.enums import RiskLevel, Sentiment, SignalCategory
from models.signals import NewsItem, Signal
from signals.advisory import (
    AdvisoryValidator, MalformedAdvisoryResponse, build_prompt, fallback_analysis, parse_advisory,
)
from signals.provider import AdvisoryProvider, CapabilityUnconfigured
from utils.http_client import UpstreamTimeout

NEWS = [NewsItem(title="ETF inflows", summary="Record week")]


def _signal(confidence=80):
    return Signal(symbol="BTCUSDT", current_price=65_000.0, category=SignalCategory.LONG_GOING,
                  confidence=confidence, suggested_action="Follow trend")


def _validate(validator, signal, market, liquidation, news=NEWS):
    return asyncio.run(validator.validate(signal, market, liquidation, news))


def test_unconfigured_returns_none(bullish_market, balanced_liquidation):
    validator = AdvisoryValidator(AdvisoryProvider(client=None))
    assert _validate(validator, _signal(), bullish_market, balanced_liquidation) is None


def test_disabled_returns_none(bullish_market, balanced_liquidation):
    provider = AdvisoryProvider(client=FakeChatClient(advisory_reply()))
    validator = AdvisoryValidator(provider, enabled=False)
    assert _validate(validator, _signal(), bullish_market, balanced_liquidation) is None


def test_valid_reply_parsed(bullish_market, balanced_liquidation):
    client = FakeChatClient(advisory_reply(is_valid=True, confidence=82, level="low"))
    validator = AdvisoryValidator(AdvisoryProvider(client=client))
    analysis = _validate(validator, _signal(), bullish_market, balanced_liquidation)

    assert analysis.source == "provider"
    assert analysis.is_valid is True
    assert analysis.confidence == 82
    assert analysis.risk_level == RiskLevel.LOW
    assert analysis.overall_sentiment == Sentiment.BULLISH
    assert analysis.key_news == NEWS

    request = client.completions.requests[0]
    assert request["response_format"] == {"type": "json_object"}
    assert "ETF inflows: Record week" in request["messages"][1]["content"]


def test_malformed_reply_falls_back(bullish_market, balanced_liquidation):
    validator = AdvisoryValidator(AdvisoryProvider(client=FakeChatClient("not json at all")))
    analysis = _validate(validator, _signal(confidence=55), bullish_market, balanced_liquidation)
    assert analysis.source == "fallback"
    assert analysis.is_valid is False
    assert analysis.confidence == 55
    assert analysis.risk_level == RiskLevel.MEDIUM
    assert analysis.warnings == ["Low confidence signal"]
    assert analysis.key_news == NEWS


def test_provider_error_falls_back(bullish_market, balanced_liquidation):
    validator = AdvisoryValidator(AdvisoryProvider(client=FakeChatClient(RuntimeError("502"))))
    analysis = _validate(validator, _signal(confidence=85), bullish_market, balanced_liquidation)
    assert analysis.source == "fallback"
    assert analysis.is_valid is True
    assert analysis.risk_level == RiskLevel.LOW
    assert analysis.warnings == []


def test_provider_timeout_falls_back(bullish_market, balanced_liquidation):
    provider = AdvisoryProvider(client=FakeChatClient("hang"), timeout=0.05)
    analysis = _validate(AdvisoryValidator(provider), _signal(), bullish_market, balanced_liquidation)
    assert analysis.source == "fallback"


@pytest.mark.parametrize("confidence,level", [(30, RiskLevel.HIGH), (69, RiskLevel.MEDIUM), (70, RiskLevel.LOW)])
def test_fallback_risk_levels(confidence, level):
    analysis = fallback_analysis(_signal(confidence), [])
    assert analysis.risk_level == level
    assert analysis.is_valid == (confidence >= 70)
    assert analysis.risk_factors == ["Technical indicators", "Market volatility"]


def test_parse_rejects_missing_validation_section():
    with pytest.raises(MalformedAdvisoryResponse):
        parse_advisory(json.dumps({"riskAssessment": {"level": "LOW"}}))


def test_parse_rejects_non_boolean_validity():
    reply = json.loads(advisory_reply())
    reply["signalValidation"]["isValid"] = "yes"
    with pytest.raises(MalformedAdvisoryResponse):
        parse_advisory(json.dumps(reply))


def test_parse_rejects_unknown_risk_level():
    with pytest.raises(MalformedAdvisoryResponse):
        parse_advisory(advisory_reply(level="SEVERE"))


def test_parse_clamps_confidence():
    assert parse_advisory(advisory_reply(confidence=140)).confidence == 100


def test_prompt_includes_market_fields(bullish_market, balanced_liquidation):
    prompt = build_prompt(_signal(), bullish_market, balanced_liquidation, [])
    assert "COIN: BTCUSDT" in prompt
    assert "5min Trend: LONG" in prompt
    assert "Liquidation Spike: NONE" in prompt
    assert "- No recent news" in prompt


def test_complete_without_client_raises():
    with pytest.raises(CapabilityUnconfigured):
        asyncio.run(AdvisoryProvider().complete("system", "user"))


def test_complete_timeout_raises_upstream_timeout():
    provider = AdvisoryProvider(client=FakeChatClient("hang"), timeout=0.05)
    with pytest.raises(UpstreamTimeout):
        asyncio.run(provider.complete("system", "user"))


def test_from_config_without_key_is_unavailable():
    provider = AdvisoryProvider.from_config({"advisory": {"api_key": "", "model": "m"}})
    assert not provider.is_available()
    assert provider.model == "m"


def test_answer_passes_query():
    client = FakeChatClient("BTC is a cryptocurrency.")
    provider = AdvisoryProvider(client=client)
    assert asyncio.run(provider.answer("What is BTC?")) == "BTC is a cryptocurrency."
    assert client.completions.requests[0]["max_tokens"] == 500
