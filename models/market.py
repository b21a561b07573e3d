"""Dataclasses for per-symbol market and liquidation snapshots."""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone

from models.enums import TrendDirection, Breakout, Crossover, LiquidationSpike


@dataclass
class MarketSnapshot:
    symbol: str
    current_price: float = 0.0
    volume: float = 0.0
    open_interest: float = 0.0
    funding_rate: float = 0.0  # percent, e.g. 0.01 == 0.01%
    long_short_ratio: float = 1.0
    delta_volume: float = 0.0  # 24h price change, percent
    trend_5m: TrendDirection = TrendDirection.NEUTRAL
    trend_15m: TrendDirection = TrendDirection.NEUTRAL
    breakout: Breakout = Breakout.NONE
    crossover: Crossover = Crossover.NONE
    source: str = "live"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        d = asdict(self)
        for key in ("trend_5m", "trend_15m", "breakout", "crossover"):
            d[key] = d[key].value
        d["timestamp"] = self.timestamp.isoformat()
        return d


@dataclass
class LiquidationSnapshot:
    symbol: str
    long_1h: float = 0.0
    short_1h: float = 0.0
    long_4h: float = 0.0
    short_4h: float = 0.0
    long_24h: float = 0.0
    short_24h: float = 0.0
    spike: LiquidationSpike = LiquidationSpike.NONE
    source: str = "primary"

    @property
    def total_1h(self):
        return self.long_1h + self.short_1h

    @property
    def total_4h(self):
        return self.long_4h + self.short_4h

    @property
    def total_24h(self):
        return self.long_24h + self.short_24h

    @property
    def long_short_ratio(self):
        """Long/short 1h liquidation ratio, short leg floored at 1 to avoid division by zero."""
        return self.long_1h / max(self.short_1h, 1)

    def to_dict(self):
        return {
            "symbol": self.symbol,
            "total_1h": self.total_1h,
            "long_1h": self.long_1h,
            "short_1h": self.short_1h,
            "total_4h": self.total_4h,
            "long_4h": self.long_4h,
            "short_4h": self.short_4h,
            "total_24h": self.total_24h,
            "long_24h": self.long_24h,
            "short_24h": self.short_24h,
            "spike": self.spike.value,
            "source": self.source,
        }
