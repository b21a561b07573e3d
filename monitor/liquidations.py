"""Liquidation snapshot collection with a three-tier fallback chain.

1. CoinGlass endpoints (primary trio concurrently, then mirrors one by one)
2. Estimate from Binance open interest and funding-rate sign
3. Synthetic figures from the symbol's popularity weight and time of day

Each tier only runs if the previous one produced no non-zero figure. The whole
chain runs under one deadline (``budget``) and falls back to synthetic figures
when it expires. The 1h figure is then extrapolated to 4h and 24h and classified for spikes.
"""
import asyncio
import logging

from models.enums import LiquidationSpike
from models.market import LiquidationSnapshot
from monitor.api.coinglass import PRIMARY_ENDPOINTS
from monitor.synthetic import SyntheticEstimator
from utils.constants import base_asset

logger = logging.getLogger("signalscan.liquidations")

SPIKE_TOTAL_FLOOR = 500_000
SPIKE_LEG_MIN = 1_000_000
LONG_SPIKE_RATIO = 2.5
SHORT_SPIKE_RATIO = 0.4

ACTIVE_HOURS = range(8, 23)  # 08:00-22:59 local
SYNTHETIC_BASE_USD = 50_000


def classify_spike(long_1h, short_1h):
    """LONG when longs were flushed, SHORT when shorts were squeezed."""
    total = long_1h + short_1h
    ratio = long_1h / max(short_1h, 1)
    if total > SPIKE_TOTAL_FLOOR:
        if long_1h > SPIKE_LEG_MIN and ratio > LONG_SPIKE_RATIO:
            return LiquidationSpike.LONG
        if short_1h > SPIKE_LEG_MIN and ratio < SHORT_SPIKE_RATIO:
            return LiquidationSpike.SHORT
    return LiquidationSpike.NONE


class LiquidationSnapshotFetcher:
    def __init__(self, coinglass, binance, estimator=None, tier_timeout=3.0, budget=5.0):
        self.coinglass = coinglass
        self.binance = binance
        self.estimator = estimator or SyntheticEstimator()
        self.tier_timeout = tier_timeout
        self.budget = budget

    async def fetch(self, symbol):
        """Never raises; falls through to synthetic figures on any failure."""
        try:
            long_1h, short_1h, source = await asyncio.wait_for(
                self._base_figures(symbol), timeout=self.budget)
        except asyncio.TimeoutError:
            logger.warning(f"{symbol}: liquidation sources exceeded {self.budget}s, using synthetic figures")
            long_1h, short_1h = self.synthetic_base(symbol)
            source = "synthetic"
        except Exception as e:
            logger.warning(f"{symbol}: liquidation fetch failed ({e}), using synthetic figures")
            long_1h, short_1h = self.synthetic_base(symbol)
            source = "synthetic"
        return self.build(symbol, long_1h, short_1h, source)

    async def _base_figures(self, symbol):
        coin = base_asset(symbol).lower()

        long_1h, short_1h = await self._primary(coin)
        if long_1h > 0 or short_1h > 0:
            return long_1h, short_1h, "primary"

        long_1h, short_1h = await self._estimate(symbol)
        if long_1h > 0 or short_1h > 0:
            logger.debug(f"{symbol}: liquidations estimated from open interest")
            return long_1h, short_1h, "estimated"

        logger.debug(f"{symbol}: no liquidation data upstream, generating synthetic figures")
        long_1h, short_1h = self.synthetic_base(symbol)
        return long_1h, short_1h, "synthetic"

    async def _primary(self, coin):
        results = await asyncio.gather(
            *(asyncio.wait_for(self.coinglass.get_endpoint(ep, coin), timeout=self.tier_timeout)
              for ep in PRIMARY_ENDPOINTS),
            return_exceptions=True,
        )
        long_1h = short_1h = 0.0
        for endpoint, result in zip(PRIMARY_ENDPOINTS, results):
            if isinstance(result, BaseException):
                logger.debug(f"CoinGlass {endpoint} failed for {coin}: {result}")
                continue
            long_1h = max(long_1h, result[0])
            short_1h = max(short_1h, result[1])

        if long_1h > 0 or short_1h > 0:
            return long_1h, short_1h

        try:
            return await asyncio.wait_for(self.coinglass.get_mirror(coin), timeout=self.tier_timeout)
        except Exception as e:
            logger.debug(f"CoinGlass mirrors failed for {coin}: {e}")
            return 0.0, 0.0

    async def _estimate(self, symbol):
        """Open-interest notional times a 0.1%-0.5% rate, skewed by who pays funding."""
        oi, funding = await asyncio.gather(
            asyncio.wait_for(self.binance.get_open_interest(symbol), timeout=self.tier_timeout),
            asyncio.wait_for(self.binance.get_funding_rate(symbol), timeout=self.tier_timeout),
            return_exceptions=True,
        )
        if isinstance(oi, BaseException) or not oi or oi <= 0:
            return 0.0, 0.0

        est = self.estimator
        total = oi * est.reference_price(symbol) * est.uniform(0.001, 0.005)

        if isinstance(funding, BaseException) or funding == 0:
            long_share = 0.5
        elif funding > 0:
            # Longs paying: crowded longs are the likelier casualties
            long_share = 0.7
        else:
            long_share = 0.3
        return total * long_share, total * (1 - long_share)

    def synthetic_base(self, symbol):
        est = self.estimator
        volatility = est.uniform(0.7, 1.8)
        if est.local_hour() in ACTIVE_HOURS:
            time_factor = est.uniform(1.2, 1.8)
        else:
            time_factor = est.uniform(0.6, 1.0)

        base = est.popularity(symbol) * SYNTHETIC_BASE_USD * volatility * time_factor
        bias = est.uniform(0.3, 1.7)
        long_1h = base * bias * est.uniform(0.4, 1.6)
        short_1h = base * (2 - bias) * est.uniform(0.4, 1.6)
        return long_1h, short_1h

    def build(self, symbol, long_1h, short_1h, source="primary"):
        """Extrapolate 4h/24h legs from the 1h base and classify the spike."""
        est = self.estimator
        return LiquidationSnapshot(
            symbol=symbol,
            long_1h=long_1h,
            short_1h=short_1h,
            long_4h=long_1h * est.uniform(3.8, 4.2),
            short_4h=short_1h * est.uniform(3.8, 4.2),
            long_24h=long_1h * est.uniform(22, 26),
            short_24h=short_1h * est.uniform(22, 26),
            spike=classify_spike(long_1h, short_1h),
            source=source,
        )
