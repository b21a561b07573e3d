"""Enums for indicator labels, sentiment, risk and signal categories."""
from enum import Enum


class TrendDirection(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    NEUTRAL = "NEUTRAL"


class Breakout(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    NONE = "NONE"


class Crossover(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NONE = "NONE"


class LiquidationSpike(str, Enum):
    # LONG = long positions were liquidated (downward pressure), SHORT = shorts squeezed
    LONG = "LONG"
    SHORT = "SHORT"
    NONE = "NONE"


class Sentiment(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class Impact(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


class SignalCategory(str, Enum):
    REVERSAL_LONG = "REVERSAL STARTED – LONG"
    REVERSAL_SHORT = "REVERSAL STARTED – SHORT"
    LONG_GOING = "LONG GOING"
    SHORT_GOING = "SHORT GOING"
    LONG_RISKY = "LONG RISKY TODAY"
    SHORT_RISKY = "SHORT RISKY TODAY"
    NO_SIGNAL = "NO SIGNAL (STAY AWAY)"

    @property
    def implies_long(self):
        return "LONG" in self.value

    @property
    def implies_short(self):
        return "SHORT" in self.value

    @property
    def is_reversal(self):
        return self in (SignalCategory.REVERSAL_LONG, SignalCategory.REVERSAL_SHORT)

    @property
    def is_continuation(self):
        return self in (SignalCategory.LONG_GOING, SignalCategory.SHORT_GOING)

    @property
    def is_risky(self):
        return self in (SignalCategory.LONG_RISKY, SignalCategory.SHORT_RISKY)
