"""Binance spot and USDT-M futures public market data client."""
import logging
import math

from utils.http_client import HTTPClient, UpstreamError
from utils.rate_limiter import RateLimiter

logger = logging.getLogger("signalscan.binance")


def _as_float(value, field, source="binance"):
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise UpstreamError(f"Unparseable {field}: {value!r}", source=source)
    if not math.isfinite(result):
        raise UpstreamError(f"Non-finite {field}: {value!r}", source=source)
    return result


class BinanceClient:
    def __init__(self, spot_url="https://api.binance.com", futures_url="https://fapi.binance.com",
                 rate_limit=1200, timeout=1.0, klines_timeout=1.5):
        limiter = RateLimiter(rate_limit)
        self.klines_timeout = klines_timeout
        self.spot = HTTPClient(spot_url, rate_limiter=limiter, timeout=timeout, source="binance")
        self.futures = HTTPClient(futures_url, rate_limiter=limiter, timeout=timeout,
                                  source="binance-futures")

    async def get_price(self, symbol):
        data = await self.spot.get("/api/v3/ticker/price", params={"symbol": symbol})
        return _as_float((data or {}).get("price"), "price")

    async def get_ticker_24h(self, symbol):
        data = await self.spot.get("/api/v3/ticker/24hr", params={"symbol": symbol}) or {}
        return {
            "volume": _as_float(data.get("volume"), "volume"),
            "price_change_pct": _as_float(data.get("priceChangePercent"), "priceChangePercent"),
        }

    async def get_funding_rate(self, symbol):
        """Latest funding rate as a fraction (0.0001 == 0.01%)."""
        data = await self.futures.get("/fapi/v1/fundingRate", params={"symbol": symbol, "limit": 1})
        if not data:
            raise UpstreamError(f"No funding rate for {symbol}", source="binance-futures")
        return _as_float(data[-1].get("fundingRate"), "fundingRate", "binance-futures")

    async def get_long_short_ratio(self, symbol, period="5m"):
        data = await self.futures.get("/futures/data/globalLongShortAccountRatio", params={
            "symbol": symbol,
            "period": period,
            "limit": 1,
        })
        if not data:
            raise UpstreamError(f"No long/short ratio for {symbol}", source="binance-futures")
        return _as_float(data[-1].get("longShortRatio"), "longShortRatio", "binance-futures")

    async def get_open_interest(self, symbol):
        """Open interest in contracts (base asset units)."""
        data = await self.futures.get("/fapi/v1/openInterest", params={"symbol": symbol}) or {}
        return _as_float(data.get("openInterest"), "openInterest", "binance-futures")

    async def get_klines(self, symbol, interval="5m", limit=20):
        data = await self.spot.get("/api/v3/klines", params={
            "symbol": symbol,
            "interval": interval,
            "limit": limit,
        }, timeout=self.klines_timeout)
        if not isinstance(data, list):
            raise UpstreamError(f"Unexpected klines payload for {symbol}", source="binance")
        return data

    async def close(self):
        await self.spot.close()
        await self.futures.close()
