"""Shared test fixtures and fake upstream clients."""
import asyncio
import os
import sys
import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.enums import TrendDirection, Breakout, Crossover, LiquidationSpike
from models.market import MarketSnapshot, LiquidationSnapshot
from monitor.synthetic import SyntheticEstimator
from utils.http_client import UpstreamError

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def kline_rows(closes):
    """Exchange-shaped kline rows with the given closes in column 4."""
    return [[i, "0", "0", "0", str(c), "0"] for i, c in enumerate(closes)]


class FakeBinance:
    """In-memory stand-in for BinanceClient; ``fail`` names methods that raise, ``hang`` ones that never return."""

    def __init__(self, price=50_000.0, volume=1_000_000.0, change=1.5, funding=0.0001,
                 ratio=1.0, open_interest=10_000.0, closes_5m=None, closes_15m=None, fail=(),
                 hang=()):
        self.price = price
        self.volume = volume
        self.change = change
        self.funding = funding
        self.ratio = ratio
        self.open_interest = open_interest
        self.closes_5m = closes_5m if closes_5m is not None else [100.0] * 20
        self.closes_15m = closes_15m if closes_15m is not None else [100.0] * 20
        self.fail = set(fail)
        self.hang = set(hang)
        self.calls = []

    async def _check(self, name):
        self.calls.append(name)
        if name in self.hang:
            await asyncio.Event().wait()
        if name in self.fail or "all" in self.fail:
            raise UpstreamError(f"{name} unavailable", source="fake")

    async def get_price(self, symbol):
        await self._check("price")
        return self.price

    async def get_ticker_24h(self, symbol):
        await self._check("ticker")
        return {"volume": self.volume, "price_change_pct": self.change}

    async def get_funding_rate(self, symbol):
        await self._check("funding")
        return self.funding

    async def get_long_short_ratio(self, symbol, period="5m"):
        await self._check("ratio")
        return self.ratio

    async def get_open_interest(self, symbol):
        await self._check("open_interest")
        return self.open_interest

    async def get_klines(self, symbol, interval="5m", limit=20):
        await self._check(f"klines_{interval}")
        closes = self.closes_5m if interval == "5m" else self.closes_15m
        return kline_rows(closes)

    async def close(self):
        pass


class FakeCoinGlass:
    def __init__(self, endpoints=None, mirror=(0.0, 0.0), fail=False, hang=False):
        self.endpoints = endpoints or {}
        self.mirror = mirror
        self.fail = fail
        self.hang = hang
        self.mirror_calls = 0

    async def get_endpoint(self, endpoint, coin):
        if self.hang:
            await asyncio.Event().wait()
        if self.fail:
            raise UpstreamError("coinglass down", status_code=503, source="fake")
        return self.endpoints.get(endpoint, (0.0, 0.0))

    async def get_mirror(self, coin):
        self.mirror_calls += 1
        if self.hang:
            await asyncio.Event().wait()
        return self.mirror

    async def close(self):
        pass


class FakeNewsAPI:
    def __init__(self, articles=None, fail=False):
        self.articles = articles or []
        self.fail = fail
        self.queries = []

    async def search(self, query, lookback_hours=24, page_size=10):
        self.queries.append(query)
        if self.fail:
            raise UpstreamError("newsapi down", status_code=500, source="fake")
        return self.articles

    async def close(self):
        pass


class FakeCompletions:
    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if reply == "hang":
            await asyncio.Event().wait()
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeChatClient:
    """Mimics the ``chat.completions.create`` surface of the Groq async client."""

    def __init__(self, *replies):
        self.completions = FakeCompletions(replies or ["NEUTRAL"])
        self.chat = SimpleNamespace(completions=self.completions)
        self.closed = False

    async def close(self):
        self.closed = True


def advisory_reply(is_valid=True, confidence=80, level="LOW", sentiment="BULLISH"):
    return json.dumps({
        "signalValidation": {
            "isValid": is_valid,
            "confidence": confidence,
            "reasoning": "Momentum and funding agree",
            "suggestedAction": "Enter on pullback",
        },
        "newsAnalysis": {
            "overallSentiment": sentiment,
            "marketContext": "Risk-on session",
        },
        "riskAssessment": {
            "level": level,
            "factors": ["Leverage"],
            "warnings": [],
        },
    })


@pytest.fixture
def estimator():
    """Seeded estimator pinned to midday UTC."""
    return SyntheticEstimator(seed=42, clock=lambda: FIXED_NOW)


@pytest.fixture
def bullish_market():
    return MarketSnapshot(
        symbol="BTCUSDT",
        current_price=65_000.0,
        volume=2_000_000.0,
        open_interest=80_000.0,
        funding_rate=-0.02,
        long_short_ratio=0.7,
        delta_volume=3.2,
        trend_5m=TrendDirection.LONG,
        trend_15m=TrendDirection.LONG,
        breakout=Breakout.UP,
        crossover=Crossover.BULLISH,
    )


@pytest.fixture
def neutral_market():
    return MarketSnapshot(symbol="ETHUSDT", current_price=3_500.0)


@pytest.fixture
def balanced_liquidation():
    return LiquidationSnapshot(
        symbol="BTCUSDT",
        long_1h=100_000.0, short_1h=100_000.0,
        long_4h=400_000.0, short_4h=400_000.0,
        long_24h=2_400_000.0, short_24h=2_400_000.0,
        spike=LiquidationSpike.NONE,
    )
