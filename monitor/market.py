"""Per-symbol market snapshot collection with per-field fallback."""
import asyncio
import logging

from models.enums import TrendDirection, Breakout, Crossover
from models.market import MarketSnapshot
from monitor import indicators
from monitor.synthetic import SyntheticEstimator

logger = logging.getLogger("signalscan.market")

# Heuristic label thresholds on the 24h percent change
CHANGE_TREND_PCT = 2.0
CHANGE_BREAKOUT_PCT = 3.0
CHANGE_NEAR_ZERO_PCT = 0.1

_FIELDS = ("price", "ticker", "funding", "ratio", "open_interest", "klines_5m", "klines_15m")


def labels_from_change(change_pct):
    """Coarse (trend_5m, trend_15m, breakout, crossover) from the 24h change when no history exists."""
    if change_pct > CHANGE_TREND_PCT:
        return TrendDirection.LONG, TrendDirection.LONG, Breakout.UP, Crossover.BULLISH
    if change_pct < -CHANGE_TREND_PCT:
        return TrendDirection.SHORT, TrendDirection.SHORT, Breakout.DOWN, Crossover.BEARISH
    return TrendDirection.NEUTRAL, TrendDirection.NEUTRAL, Breakout.NONE, Crossover.NONE


class MarketSnapshotFetcher:
    """Collects price, derivatives and price-history data for one symbol.

    ``fetch`` never raises: every upstream call is settled independently and
    any field whose call failed is replaced by a synthetic estimate.
    """

    def __init__(self, binance, estimator=None, klines_limit=20, call_timeout=2.0):
        self.binance = binance
        self.estimator = estimator or SyntheticEstimator()
        self.klines_limit = klines_limit
        self.call_timeout = call_timeout

    async def _bounded(self, coro):
        return await asyncio.wait_for(coro, timeout=self.call_timeout)

    async def fetch(self, symbol):
        try:
            return await self._fetch_live(symbol)
        except Exception as e:
            logger.warning(f"{symbol}: market fetch failed ({e}), using synthetic snapshot")
            return self.synthetic_snapshot(symbol)

    async def _fetch_live(self, symbol):
        results = await asyncio.gather(
            self._bounded(self.binance.get_price(symbol)),
            self._bounded(self.binance.get_ticker_24h(symbol)),
            self._bounded(self.binance.get_funding_rate(symbol)),
            self._bounded(self.binance.get_long_short_ratio(symbol)),
            self._bounded(self.binance.get_open_interest(symbol)),
            self._bounded(self.binance.get_klines(symbol, "5m", self.klines_limit)),
            self._bounded(self.binance.get_klines(symbol, "15m", self.klines_limit)),
            return_exceptions=True,
        )
        data = {}
        for name, result in zip(_FIELDS, results):
            if isinstance(result, BaseException):
                logger.debug(f"{symbol}: {name} unavailable ({type(result).__name__}: {result})")
            else:
                data[name] = result

        if not data:
            logger.warning(f"{symbol}: all market calls failed, using synthetic snapshot")
            return self.synthetic_snapshot(symbol)

        est = self.estimator
        price = data.get("price")
        if not price or price <= 0:
            price = est.reference_price(symbol)

        ticker = data.get("ticker")
        if ticker is not None:
            volume = ticker["volume"]
            change = ticker["price_change_pct"]
        else:
            volume = est.uniform(50_000_000, 200_000_000)
            change = est.uniform(-5, 5)

        # Exchange reports a fraction; scorer thresholds are in percent
        funding = data["funding"] * 100 if "funding" in data else est.uniform(-0.02, 0.02)
        ratio = data["ratio"] if "ratio" in data else est.uniform(0.8, 1.2)
        open_interest = data["open_interest"] if "open_interest" in data else est.uniform(1e8, 1e9)

        if "klines_5m" not in data and "klines_15m" not in data:
            trend_5m, trend_15m, breakout, cross = labels_from_change(change)
        else:
            trend_5m, trend_15m = TrendDirection.NEUTRAL, TrendDirection.NEUTRAL
            breakout, cross = Breakout.NONE, Crossover.NONE
            if "klines_5m" in data:
                closes = indicators.closes_from_klines(data["klines_5m"])
                trend_5m = indicators.trend(closes)
                breakout = indicators.volatility_breakout(closes)
                cross = indicators.crossover(closes)
            if "klines_15m" in data:
                trend_15m = indicators.trend(indicators.closes_from_klines(data["klines_15m"]))

        return MarketSnapshot(
            symbol=symbol,
            current_price=price,
            volume=volume,
            open_interest=open_interest,
            funding_rate=funding,
            long_short_ratio=ratio,
            delta_volume=change,
            trend_5m=trend_5m,
            trend_15m=trend_15m,
            breakout=breakout,
            crossover=cross,
            source="live" if len(data) == len(_FIELDS) else "partial",
        )

    def synthetic_snapshot(self, symbol):
        """Oracle price plus random values whose labels follow the sign of the sampled change."""
        est = self.estimator
        change = est.uniform(-5, 5)

        if change > CHANGE_NEAR_ZERO_PCT:
            direction = TrendDirection.LONG
        elif change < -CHANGE_NEAR_ZERO_PCT:
            direction = TrendDirection.SHORT
        else:
            direction = TrendDirection.NEUTRAL

        if change > CHANGE_BREAKOUT_PCT:
            breakout = Breakout.UP
        elif change < -CHANGE_BREAKOUT_PCT:
            breakout = Breakout.DOWN
        else:
            breakout = Breakout.NONE

        if change > CHANGE_TREND_PCT:
            cross = Crossover.BULLISH
        elif change < -CHANGE_TREND_PCT:
            cross = Crossover.BEARISH
        else:
            cross = Crossover.NONE

        return MarketSnapshot(
            symbol=symbol,
            current_price=est.reference_price(symbol),
            volume=est.uniform(50_000_000, 200_000_000),
            open_interest=est.uniform(1e8, 1e9),
            funding_rate=est.uniform(-0.02, 0.02),
            long_short_ratio=est.uniform(0.8, 1.2),
            delta_volume=change,
            trend_5m=direction,
            trend_15m=direction,
            breakout=breakout,
            crossover=cross,
            source="synthetic",
        )
