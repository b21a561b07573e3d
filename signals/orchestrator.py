"""Batch orchestration of per-symbol signal pipelines."""
import asyncio
import logging
import time
from dataclasses import replace

from models.enums import Sentiment, SignalCategory
from models.signals import BatchReport
from signals.scorer import SignalScorer
from utils.concurrency import first_of
from utils.constants import PRIORITY_SYMBOLS

logger = logging.getLogger("signalscan.orchestrator")


class BatchProcessingError(Exception):
    """A cycle failed as a whole; ``partial`` holds the ranked signals collected so far."""
    def __init__(self, message, partial=None):
        super().__init__(message)
        self.partial = list(partial or [])


class BatchOrchestrator:
    """Runs the full pipeline for many symbols under a per-item time budget.

    Symbols are split into fixed-size batches; all batches and all symbols
    within a batch run concurrently. A symbol whose pipeline times out or
    fails is retried in reduced form (market + liquidation, neutral
    sentiment, no advisory), and if that also fails a synthetic-only signal
    is scored, so every requested symbol yields exactly one Signal.
    """

    def __init__(self, market_fetcher, liquidation_fetcher, news_provider, scorer=None,
                 validator=None, batch_size=12, item_timeout=8.0, validation_threshold=60,
                 invalid_confidence_cap=60, high_confidence=70, min_high_confidence=10, top_n=25,
                 priority_symbols=PRIORITY_SYMBOLS):
        self.market_fetcher = market_fetcher
        self.liquidation_fetcher = liquidation_fetcher
        self.news_provider = news_provider
        self.scorer = scorer or SignalScorer()
        self.validator = validator
        self.batch_size = batch_size
        self.item_timeout = item_timeout
        self.validation_threshold = validation_threshold
        self.invalid_confidence_cap = invalid_confidence_cap
        self.high_confidence = high_confidence
        self.min_high_confidence = min_high_confidence
        self.top_n = top_n
        self.priority_symbols = frozenset(priority_symbols)

    @property
    def advisory_enabled(self):
        return self.validator is not None and self.validator.is_enabled()

    def batches(self, symbols):
        size = max(1, self.batch_size)
        return [symbols[i:i + size] for i in range(0, len(symbols), size)]

    async def run(self, symbols):
        report = await self.run_report(symbols)
        return report.selected

    async def run_report(self, symbols):
        symbols = [s.upper() for s in symbols]
        start = time.monotonic()
        collected = {}
        batches = self.batches(list(enumerate(symbols)))
        logger.info(f"Processing {len(symbols)} symbols in {len(batches)} batches "
                    f"of up to {self.batch_size}")

        try:
            await asyncio.gather(*(self._run_batch(batch, collected) for batch in batches))
        except Exception as e:
            logger.error(f"Batch processing failed after {len(collected)} signals: {e}")
            partial = self.rank(self._in_order(collected))
            raise BatchProcessingError(f"Processing error: {e}", partial=partial) from e

        ranked = self.rank(self._in_order(collected))
        high = [s for s in ranked if s.confidence >= self.high_confidence]
        report = BatchReport(
            ranked=ranked,
            selected=self.select(ranked),
            total_symbols=len(symbols),
            high_confidence_count=len(high),
            advisory_validated_count=sum(1 for s in ranked if s.is_advisory_valid),
            processing_time_ms=int((time.monotonic() - start) * 1000),
            advisory_enabled=self.advisory_enabled,
        )
        logger.info(f"Completed {report.total_processed}/{len(symbols)} symbols in "
                    f"{report.processing_time_ms}ms ({report.high_confidence_count} high confidence)")
        return report

    @staticmethod
    def _in_order(collected):
        return [collected[i] for i in sorted(collected)]

    async def _run_batch(self, batch, collected):
        async def _one(index, symbol):
            collected[index] = await self.process_symbol(symbol)

        await asyncio.gather(*(_one(i, s) for i, s in batch))

    async def process_symbol(self, symbol):
        """Full pipeline raced against the item timeout, with a reduced retry behind it."""
        return await first_of(
            self.full_pipeline(symbol),
            self.item_timeout,
            lambda exc: self._reduced_or_synthetic(symbol),
            label=symbol,
        )

    async def _reduced_or_synthetic(self, symbol):
        return await first_of(
            self.reduced_pipeline(symbol),
            self.item_timeout,
            lambda exc: self.synthetic_signal(symbol),
            label=f"{symbol} (reduced)",
        )

    def should_validate(self, signal):
        return (signal.confidence >= self.validation_threshold
                or signal.symbol in self.priority_symbols)

    async def full_pipeline(self, symbol):
        market, liquidation = await asyncio.gather(
            self.market_fetcher.fetch(symbol),
            self.liquidation_fetcher.fetch(symbol),
        )
        news = await self.news_provider.fetch_news(symbol)
        sentiment = await self.news_provider.sentiment(news)
        signal = self.scorer.score(market, liquidation, sentiment)

        if self.advisory_enabled and self.should_validate(signal):
            try:
                advisory = await self.validator.validate(signal, market, liquidation, news)
            except Exception as e:
                logger.warning(f"{symbol}: advisory failed, keeping technical signal: {e}")
                advisory = None
            if advisory is not None:
                signal = replace(signal, advisory=advisory)
                if not advisory.is_valid:
                    signal = replace(signal, confidence=min(signal.confidence,
                                                            self.invalid_confidence_cap))
        return signal

    async def reduced_pipeline(self, symbol):
        market, liquidation = await asyncio.gather(
            self.market_fetcher.fetch(symbol),
            self.liquidation_fetcher.fetch(symbol),
        )
        signal = self.scorer.score(market, liquidation, Sentiment.NEUTRAL)
        return replace(signal, degraded=True)

    async def synthetic_signal(self, symbol):
        market = self.market_fetcher.synthetic_snapshot(symbol)
        long_1h, short_1h = self.liquidation_fetcher.synthetic_base(symbol)
        liquidation = self.liquidation_fetcher.build(symbol, long_1h, short_1h, "synthetic")
        signal = self.scorer.score(market, liquidation, Sentiment.NEUTRAL)
        return replace(signal, degraded=True)

    @staticmethod
    def rank(signals):
        """Advisory-valid first, then actionable categories, then confidence descending."""
        return sorted(signals, key=lambda s: (
            not s.is_advisory_valid,
            s.category == SignalCategory.NO_SIGNAL,
            -s.confidence,
        ))

    def select(self, ranked):
        high = [s for s in ranked if s.confidence >= self.high_confidence]
        if len(high) >= self.min_high_confidence:
            return high
        return ranked[:self.top_n]
