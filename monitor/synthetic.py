"""Seedable source of synthetic estimates used when upstream data is missing."""
import random
from datetime import datetime, timezone

from utils.constants import (
    REFERENCE_PRICES, UNKNOWN_PRICE_RANGE, LIQUIDATION_POPULARITY, base_asset,
)


class SyntheticEstimator:
    """Randomness, reference tables and the clock behind every fallback value.

    Pass ``seed`` (or an ``rng``) for reproducible output in tests, and ``clock``
    to pin the time of day and news timestamps.
    """

    def __init__(self, seed=None, rng=None, clock=None):
        self.rng = rng or random.Random(seed)
        self._clock = clock

    def uniform(self, low, high):
        return self.rng.uniform(low, high)

    def now(self):
        if self._clock is not None:
            return self._clock()
        return datetime.now(timezone.utc)

    def local_hour(self):
        if self._clock is not None:
            return self._clock().hour
        return datetime.now().hour

    def reference_price(self, symbol):
        """Baseline price plus bounded symmetric jitter; generic range when unknown."""
        entry = REFERENCE_PRICES.get(symbol.upper())
        if entry is None:
            return self.uniform(*UNKNOWN_PRICE_RANGE)
        base, jitter = entry
        return base + self.uniform(-jitter, jitter)

    def popularity(self, symbol):
        return LIQUIDATION_POPULARITY.get(base_asset(symbol).lower(), 1.0)
