"""News collection and sentiment for a symbol."""
import logging
from datetime import datetime, timedelta

from models.enums import Sentiment, Impact
from models.signals import NewsItem
from monitor.synthetic import SyntheticEstimator
from utils.constants import QUOTE_ASSET, base_asset

logger = logging.getLogger("signalscan.news")

SUMMARY_MAX_CHARS = 200

# (title, summary, sentiment, impact); {coin} is the base asset
FALLBACK_TEMPLATES = (
    ("{coin} Shows Strong Technical Breakout",
     "{coin} has broken above key resistance levels with increased volume, "
     "suggesting potential upward momentum.",
     Sentiment.BULLISH, Impact.MEDIUM),
    ("Market Analysis: {coin} Trading Patterns",
     "Technical analysts note interesting patterns in {coin} price action amid "
     "broader market movements.",
     Sentiment.NEUTRAL, Impact.LOW),
    ("Institutional Interest in {coin} Growing",
     "Recent on-chain data suggests increased institutional activity in {coin} markets.",
     Sentiment.BULLISH, Impact.HIGH),
)


def _parse_published(value, default):
    if not value:
        return default
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return default


class NewsProvider:
    """Keyword news search with a fixed template fallback.

    ``newsapi`` is optional; without it every call returns the templates.
    ``provider`` (an AdvisoryProvider) classifies sentiment when configured.
    """

    def __init__(self, newsapi=None, provider=None, estimator=None, max_articles=5,
                 lookback_hours=24):
        self.newsapi = newsapi
        self.provider = provider
        self.estimator = estimator or SyntheticEstimator()
        self.max_articles = max_articles
        self.lookback_hours = lookback_hours

    async def fetch_news(self, symbol):
        coin = base_asset(symbol)
        items = []

        if self.newsapi is not None:
            try:
                articles = await self.newsapi.search(
                    f"{coin} cryptocurrency bitcoin ethereum crypto",
                    lookback_hours=self.lookback_hours,
                )
                items = [self._from_article(a, symbol) for a in articles[:self.max_articles]]
            except Exception as e:
                logger.warning(f"News search failed for {coin}, using fallback news: {e}")

        if not items:
            items = self.fallback_news(symbol)
        return items[:self.max_articles]

    def _from_article(self, article, symbol):
        summary = article.get("description") or (article.get("content") or "")[:SUMMARY_MAX_CHARS]
        return NewsItem(
            title=article["title"],
            summary=summary,
            url=article.get("url") or "",
            published_at=_parse_published(article.get("publishedAt"), self.estimator.now()),
            sentiment=Sentiment.NEUTRAL,
            impact=Impact.MEDIUM,
            symbols=[symbol],
        )

    def fallback_news(self, symbol):
        """Three fixed articles, newest first, one hour apart."""
        coin = base_asset(symbol)
        now = self.estimator.now()
        return [
            NewsItem(
                title=title.format(coin=coin),
                summary=summary.format(coin=coin),
                url=f"https://example.com/news/{coin.lower()}-{i}",
                published_at=now - timedelta(hours=i),
                sentiment=sentiment,
                impact=impact,
                symbols=[f"{coin}{QUOTE_ASSET}"],
            )
            for i, (title, summary, sentiment, impact) in enumerate(FALLBACK_TEMPLATES)
        ]

    async def sentiment(self, items):
        if not items or self.provider is None or not self.provider.is_available():
            return Sentiment.NEUTRAL
        try:
            return await self.provider.classify_sentiment(items)
        except Exception as e:
            logger.warning(f"Sentiment classification failed: {e}")
            return Sentiment.NEUTRAL
