"""Signal service: the operations exposed to the CLI and any outer layer."""
import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone

from models.signals import Opportunity
from monitor.api import APIRegistry
from monitor.liquidations import LiquidationSnapshotFetcher
from monitor.market import MarketSnapshotFetcher
from monitor.news import NewsProvider
from monitor.synthetic import SyntheticEstimator
from signals.advisory import AdvisoryValidator
from signals.orchestrator import BatchOrchestrator, BatchProcessingError
from signals.provider import AdvisoryProvider
from signals.scorer import SignalScorer, market_commentary
from utils.constants import ALL_SYMBOLS, CURATED_SYMBOLS

logger = logging.getLogger("signalscan.service")

MAX_OPPORTUNITIES = 10
MAX_PARTIAL_SIGNALS = 10
MAX_ANALYSIS_NEWS = 3
# Share of the item timeout the liquidation chain may spend
LIQUIDATION_BUDGET_SHARE = 0.6

SEARCH_UNCONFIGURED = ("AI search is not available. Please configure GROQ_API_KEY "
                       "in your environment variables.")
SEARCH_FAILED = "AI search is currently unavailable. Please try again later."


class InvalidQuery(ValueError):
    """Rejected input, raised before any upstream work starts."""


def _normalise_symbol(symbol):
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidQuery("Symbol is required")
    return symbol.strip().upper()


class SignalService:
    def __init__(self, orchestrator, provider=None, registry=None):
        self.orchestrator = orchestrator
        self.provider = provider or AdvisoryProvider()
        self.registry = registry

    @classmethod
    def from_config(cls, config, estimator=None):
        """Wire clients, fetchers and the orchestrator from a loaded config dict."""
        estimator = estimator or SyntheticEstimator()
        registry = APIRegistry(config)
        provider = AdvisoryProvider.from_config(config)

        binance_cfg = config["api"]["binance"]
        coinglass_cfg = config["api"]["coinglass"]
        news_cfg = config["news"]
        orch_cfg = config["orchestrator"]

        market = MarketSnapshotFetcher(
            registry.binance,
            estimator=estimator,
            klines_limit=binance_cfg.get("klines_limit", 20),
            call_timeout=max(binance_cfg.get("timeout", 1.0), binance_cfg.get("klines_timeout", 1.5)),
        )
        liquidations = LiquidationSnapshotFetcher(
            registry.coinglass,
            registry.binance,
            estimator=estimator,
            tier_timeout=coinglass_cfg.get("timeout", 3.0),
            budget=min(coinglass_cfg.get("budget", 5.0),
                       orch_cfg["item_timeout"] * LIQUIDATION_BUDGET_SHARE),
        )
        news = NewsProvider(
            registry.newsapi,
            provider=provider,
            estimator=estimator,
            max_articles=news_cfg.get("max_articles", 5),
            lookback_hours=news_cfg.get("lookback_hours", 24),
        )
        validator = AdvisoryValidator(provider, enabled=config["advisory"].get("enabled", True))

        orchestrator = BatchOrchestrator(
            market, liquidations, news,
            scorer=SignalScorer(),
            validator=validator,
            batch_size=orch_cfg["batch_size"],
            item_timeout=orch_cfg["item_timeout"],
            validation_threshold=orch_cfg.get("validation_threshold", 60),
            invalid_confidence_cap=orch_cfg.get("invalid_confidence_cap", 60),
            high_confidence=orch_cfg["high_confidence"],
            min_high_confidence=orch_cfg.get("min_high_confidence", 10),
            top_n=orch_cfg.get("top_n", 25),
            priority_symbols=orch_cfg.get("priority_symbols") or (),
        )
        return cls(orchestrator, provider=provider, registry=registry)

    async def get_signals(self, symbols=None):
        """Ranked and filtered signals for ``symbols`` (default: the full universe)."""
        symbols = [_normalise_symbol(s) for s in (symbols or ALL_SYMBOLS)]
        try:
            report = await self.orchestrator.run_report(symbols)
        except BatchProcessingError as e:
            return {
                "error": "Processing error",
                "signals": e.partial[:MAX_PARTIAL_SIGNALS],
                "metadata": {
                    "total_processed": len(e.partial),
                    "total_symbols": len(symbols),
                    "high_confidence_count": 0,
                    "advisory_validated_count": 0,
                    "processing_time_ms": 0,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "advisory_enabled": self.orchestrator.advisory_enabled,
                },
            }
        return {"signals": report.selected, "metadata": report.metadata()}

    async def analyze_symbol(self, symbol):
        """Deep dive on one symbol; the advisory verdict is attached but does not cap confidence."""
        symbol = _normalise_symbol(symbol)
        orch = self.orchestrator

        market, liquidation = await asyncio.gather(
            orch.market_fetcher.fetch(symbol),
            orch.liquidation_fetcher.fetch(symbol),
        )
        news = await orch.news_provider.fetch_news(symbol)
        sentiment = await orch.news_provider.sentiment(news)
        signal = orch.scorer.score(market, liquidation, sentiment)

        advisory = None
        if orch.validator is not None:
            try:
                advisory = await orch.validator.validate(signal, market, liquidation, news)
            except Exception as e:
                logger.warning(f"{symbol}: advisory failed during analysis: {e}")
        if advisory is not None:
            signal = replace(signal, advisory=advisory)

        return {
            "symbol": symbol,
            "signal": signal,
            "market": market,
            "liquidation": liquidation,
            "sentiment": sentiment,
            "recommendation": market_commentary(market, liquidation, sentiment),
            "advisory": advisory,
            "news": news[:MAX_ANALYSIS_NEWS],
            "timestamp": datetime.now(timezone.utc),
        }

    async def _opportunity(self, symbol):
        orch = self.orchestrator
        market, liquidation = await asyncio.gather(
            orch.market_fetcher.fetch(symbol),
            orch.liquidation_fetcher.fetch(symbol),
        )
        news = await orch.news_provider.fetch_news(symbol)
        sentiment = await orch.news_provider.sentiment(news)
        signal = orch.scorer.score(market, liquidation, sentiment)
        return Opportunity(
            symbol=symbol,
            signal=signal,
            confidence=signal.confidence,
            recommendation=market_commentary(market, liquidation, sentiment),
        )

    async def find_opportunities(self, symbols=None):
        """Confidence-sorted opportunities over a curated list, top ten."""
        symbols = [_normalise_symbol(s) for s in (symbols or CURATED_SYMBOLS)]
        timeout = self.orchestrator.item_timeout
        results = await asyncio.gather(
            *(asyncio.wait_for(self._opportunity(s), timeout=timeout) for s in symbols),
            return_exceptions=True,
        )

        opportunities = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, BaseException):
                logger.warning(f"Failed to analyze {symbol}: {result!r}")
                continue
            opportunities.append(result)

        opportunities.sort(key=lambda o: o.confidence, reverse=True)
        logger.info(f"Found {len(opportunities)} opportunities, returning top {MAX_OPPORTUNITIES}")
        return opportunities[:MAX_OPPORTUNITIES]

    async def free_text_query(self, text):
        if not isinstance(text, str) or not text.strip():
            raise InvalidQuery("Query is required")
        if not self.provider.is_available():
            return SEARCH_UNCONFIGURED
        try:
            return await self.provider.answer(text.strip())
        except Exception as e:
            logger.error(f"Free-text query failed: {e}")
            return SEARCH_FAILED

    async def health_check(self):
        """Upstream reachability, plus whether the advisory provider is configured."""
        health = await self.registry.health_check() if self.registry is not None else {}
        health["Advisory provider"] = {"reachable": self.provider.is_available(), "latency_ms": 0}
        return health

    async def close(self):
        if self.registry is not None:
            await self.registry.close()
        await self.provider.close()
