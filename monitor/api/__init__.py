"""API client registry."""
import asyncio
import logging
import time

from monitor.api.binance import BinanceClient
from monitor.api.coinglass import CoinGlassClient, PRIMARY_ENDPOINTS
from monitor.api.newsapi import NewsAPIClient

logger = logging.getLogger("signalscan.api")


class APIRegistry:
    def __init__(self, config=None):
        cfg = config or {}
        api_cfg = cfg.get("api", {})
        binance_cfg = api_cfg.get("binance", {})
        coinglass_cfg = api_cfg.get("coinglass", {})
        news_cfg = api_cfg.get("newsapi", {})

        self.binance = BinanceClient(
            spot_url=binance_cfg.get("spot_url", "https://api.binance.com"),
            futures_url=binance_cfg.get("futures_url", "https://fapi.binance.com"),
            rate_limit=binance_cfg.get("rate_limit", 1200),
            timeout=binance_cfg.get("timeout", 1.0),
            klines_timeout=binance_cfg.get("klines_timeout", 1.5),
        )
        self.coinglass = CoinGlassClient(
            base_url=coinglass_cfg.get("base_url", "https://open-api.coinglass.com"),
            rate_limit=coinglass_cfg.get("rate_limit", 600),
            timeout=coinglass_cfg.get("timeout", 3.0),
            mirror_timeout=coinglass_cfg.get("mirror_timeout", 2.0),
        )

        # News search is optional: without a key the template fallback is used
        news_key = cfg.get("news", {}).get("api_key")
        self.newsapi = None
        if news_key:
            self.newsapi = NewsAPIClient(
                api_key=news_key,
                base_url=news_cfg.get("base_url", "https://newsapi.org/v2"),
                rate_limit=news_cfg.get("rate_limit", 60),
                timeout=news_cfg.get("timeout", 5.0),
            )

    async def health_check(self):
        """Test connectivity to each upstream concurrently."""

        async def _check(name, coro):
            start = time.monotonic()
            try:
                await coro
                reachable = True
            except Exception as e:
                logger.debug(f"Health check for {name} failed: {e}")
                reachable = False
            latency = int((time.monotonic() - start) * 1000)
            return name, {"reachable": reachable, "latency_ms": latency}

        checks = [
            _check("Binance spot", self.binance.get_price("BTCUSDT")),
            _check("Binance futures", self.binance.get_open_interest("BTCUSDT")),
            _check("CoinGlass", self.coinglass.get_endpoint(PRIMARY_ENDPOINTS[0], "btc")),
        ]
        if self.newsapi is not None:
            checks.append(_check("NewsAPI", self.newsapi.search("bitcoin", page_size=1)))

        return dict(await asyncio.gather(*checks))

    async def close(self):
        for client in [self.binance, self.coinglass, self.newsapi]:
            if client is not None:
                await client.close()
