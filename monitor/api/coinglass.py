"""CoinGlass liquidation client.

The public endpoints are inconsistent about payload shape: some return a
series (latest interval last), others a single object, and the long/short
keys vary between ``longLiquidation``/``long``. ``parse_liquidations``
normalises all of them to a ``(long, short)`` pair.
"""
import logging

from utils.http_client import HTTPClient, UpstreamError
from utils.rate_limiter import RateLimiter

logger = logging.getLogger("signalscan.coinglass")

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                  "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Referer": "https://www.coinglass.com/",
}

PRIMARY_ENDPOINTS = (
    "/public/v2/liquidation_chart",
    "/public/v2/liquidation_history",
    "/public/v2/futures_liquidation_chart",
)

# Tried one at a time when the primary trio returns nothing
MIRROR_ENDPOINTS = (
    ("https://fapi.coinglass.com/api/futures/liquidation/v2", lambda coin: {"symbol": coin.upper(), "interval": "1h"}),
    ("https://open-api.coinglass.com/api/pro/v1/futures_liquidation_chart",
     lambda coin: {"symbol": coin, "time_type": "1h"}),
    ("https://api.coinglass.com/api/liquidation/{coin}", lambda coin: {"timeType": "1h"}),
)


def _num(value):
    try:
        return max(float(value or 0), 0.0)
    except (TypeError, ValueError):
        return 0.0


def parse_liquidations(payload):
    """Return (long, short) for the most recent interval, (0, 0) when absent."""
    if not isinstance(payload, dict):
        return 0.0, 0.0
    body = payload.get("data")
    if body is None:
        body = payload.get("result")

    if isinstance(body, list):
        if not body or not isinstance(body[-1], dict):
            return 0.0, 0.0
        body = body[-1]
    if not isinstance(body, dict):
        return 0.0, 0.0

    long_liq = body.get("longLiquidation", body.get("long"))
    short_liq = body.get("shortLiquidation", body.get("short"))
    return _num(long_liq), _num(short_liq)


class CoinGlassClient:
    def __init__(self, base_url="https://open-api.coinglass.com", rate_limit=600, timeout=3.0,
                 mirror_timeout=2.0):
        self.mirror_timeout = mirror_timeout
        self.client = HTTPClient(
            base_url=base_url,
            rate_limiter=RateLimiter(rate_limit),
            timeout=timeout,
            headers=BROWSER_HEADERS,
            source="coinglass",
        )

    async def get_endpoint(self, endpoint, coin):
        """Query one primary endpoint for the latest 1h interval."""
        payload = await self.client.get(endpoint, params={"symbol": coin, "time_type": "1h"})
        return parse_liquidations(payload)

    async def get_mirror(self, coin):
        """Walk the mirror endpoints until one reports non-zero liquidations."""
        for url, make_params in MIRROR_ENDPOINTS:
            try:
                payload = await self.client.get(url.format(coin=coin), params=make_params(coin),
                                                timeout=self.mirror_timeout)
            except UpstreamError as e:
                logger.debug(f"CoinGlass mirror {url} failed for {coin}: {e}")
                continue
            long_liq, short_liq = parse_liquidations(payload)
            if long_liq > 0 or short_liq > 0:
                return long_liq, short_liq
        return 0.0, 0.0

    async def close(self):
        await self.client.close()
