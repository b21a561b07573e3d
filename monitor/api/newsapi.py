"""NewsAPI.org article search client."""
import logging
from datetime import datetime, timedelta, timezone

from utils.http_client import HTTPClient
from utils.rate_limiter import RateLimiter

logger = logging.getLogger("signalscan.newsapi")


class NewsAPIClient:
    def __init__(self, api_key, base_url="https://newsapi.org/v2", rate_limit=60, timeout=5.0,
                 cache_ttl=300):
        self.api_key = api_key
        self.client = HTTPClient(
            base_url=base_url,
            rate_limiter=RateLimiter(rate_limit),
            timeout=timeout,
            cache_ttl=cache_ttl,
            headers={"X-Api-Key": api_key},
            source="newsapi",
        )

    async def search(self, query, lookback_hours=24, page_size=10):
        """Most recent English articles matching ``query`` within the lookback window."""
        since = datetime.now(timezone.utc) - timedelta(hours=lookback_hours)
        data = await self.client.get("/everything", params={
            "q": query,
            "sortBy": "publishedAt",
            "language": "en",
            "pageSize": page_size,
            "from": since.strftime("%Y-%m-%dT%H:%M:%SZ"),
        })
        articles = (data or {}).get("articles") or []
        return [a for a in articles if isinstance(a, dict) and a.get("title")]

    async def close(self):
        await self.client.close()
