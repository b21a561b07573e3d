"""Data models."""
from models.enums import (
    TrendDirection, Breakout, Crossover, LiquidationSpike, Sentiment, Impact, RiskLevel, SignalCategory,
)
from models.market import MarketSnapshot, LiquidationSnapshot
from models.signals import NewsItem, AdvisoryAnalysis, Signal, Opportunity, BatchReport
