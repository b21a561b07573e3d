"""Dataclasses for news, advisory analysis, and scored signals."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from models.enums import Sentiment, Impact, RiskLevel, SignalCategory


@dataclass
class NewsItem:
    title: str
    summary: str = ""
    url: str = ""
    published_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sentiment: Sentiment = Sentiment.NEUTRAL
    impact: Impact = Impact.MEDIUM
    symbols: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "title": self.title,
            "summary": self.summary,
            "url": self.url,
            "published_at": self.published_at.isoformat(),
            "sentiment": self.sentiment.value,
            "impact": self.impact.value,
            "symbols": list(self.symbols),
        }


@dataclass
class AdvisoryAnalysis:
    is_valid: bool
    confidence: int
    reasoning: str = ""
    suggested_action: str = ""
    overall_sentiment: Sentiment = Sentiment.NEUTRAL
    market_context: str = ""
    risk_level: RiskLevel = RiskLevel.MEDIUM
    risk_factors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    key_news: List[NewsItem] = field(default_factory=list)
    source: str = "provider"

    def to_dict(self):
        return {
            "signal_validation": {
                "is_valid": self.is_valid,
                "confidence": self.confidence,
                "reasoning": self.reasoning,
                "suggested_action": self.suggested_action,
            },
            "news_analysis": {
                "overall_sentiment": self.overall_sentiment.value,
                "key_news": [n.to_dict() for n in self.key_news],
                "market_context": self.market_context,
            },
            "risk_assessment": {
                "level": self.risk_level.value,
                "factors": list(self.risk_factors),
                "warnings": list(self.warnings),
            },
            "source": self.source,
        }


@dataclass
class Signal:
    symbol: str
    current_price: float
    category: SignalCategory = SignalCategory.NO_SIGNAL
    confidence: int = 0
    trend_summary: List[str] = field(default_factory=list)
    suggested_action: str = ""
    advisory: Optional[AdvisoryAnalysis] = None
    degraded: bool = False

    @property
    def is_advisory_valid(self):
        return self.advisory is not None and self.advisory.is_valid

    def to_dict(self):
        return {
            "symbol": self.symbol,
            "current_price": self.current_price,
            "signal": self.category.value,
            "confidence": self.confidence,
            "trend_summary": list(self.trend_summary),
            "suggested_action": self.suggested_action,
            "advisory": self.advisory.to_dict() if self.advisory else None,
            "degraded": self.degraded,
        }


@dataclass
class Opportunity:
    symbol: str
    signal: Signal
    confidence: int
    recommendation: str

    def to_dict(self):
        return {
            "symbol": self.symbol,
            "signal": self.signal.to_dict(),
            "confidence": self.confidence,
            "recommendation": self.recommendation,
        }


@dataclass
class BatchReport:
    """Outcome of one orchestration cycle over a symbol universe."""
    ranked: List[Signal] = field(default_factory=list)
    selected: List[Signal] = field(default_factory=list)
    total_symbols: int = 0
    high_confidence_count: int = 0
    advisory_validated_count: int = 0
    processing_time_ms: int = 0
    advisory_enabled: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_processed(self):
        return len(self.ranked)

    def metadata(self):
        return {
            "total_processed": self.total_processed,
            "total_symbols": self.total_symbols,
            "high_confidence_count": self.high_confidence_count,
            "advisory_validated_count": self.advisory_validated_count,
            "processing_time_ms": self.processing_time_ms,
            "timestamp": self.timestamp.isoformat(),
            "advisory_enabled": self.advisory_enabled,
        }
