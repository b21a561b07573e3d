"""Optional LLM reasoning provider backed by the Groq chat completions API."""
import asyncio
import logging

from groq import AsyncGroq

from models.enums import Sentiment
from utils.http_client import UpstreamError, UpstreamTimeout

logger = logging.getLogger("signalscan.provider")

DEFAULT_MODEL = "llama-3.3-70b-versatile"

SENTIMENT_SYSTEM_PROMPT = "Analyze crypto news sentiment. Respond with only: BULLISH, BEARISH, or NEUTRAL"
ANSWER_SYSTEM_PROMPT = (
    "You are a crypto expert. Provide accurate, up-to-date information about cryptocurrencies, "
    "market trends, and trading analysis. Keep responses concise but informative."
)


class CapabilityUnconfigured(Exception):
    """The advisory provider has no API key; callers treat this as a feature toggle."""


class AdvisoryProvider:
    """Thin wrapper around an injected async chat client.

    ``client`` is ``None`` when no API key is configured. Use ``is_available``
    before calling, or catch ``CapabilityUnconfigured``.
    """

    def __init__(self, client=None, model=DEFAULT_MODEL, max_tokens=1000, temperature=0.3,
                 timeout=10.0):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        cfg = (config or {}).get("advisory", {})
        api_key = cfg.get("api_key")
        client = None
        if api_key:
            client = AsyncGroq(api_key=api_key)
        else:
            logger.info("No advisory API key configured; advisory features disabled")
        return cls(
            client=client,
            model=cfg.get("model", DEFAULT_MODEL),
            max_tokens=cfg.get("max_tokens", 1000),
            temperature=cfg.get("temperature", 0.3),
            timeout=cfg.get("timeout", 10.0),
        )

    def is_available(self):
        return self.client is not None

    async def complete(self, system, user, max_tokens=None, temperature=None, json_mode=False):
        """Return the stripped text of the first completion choice."""
        if not self.is_available():
            raise CapabilityUnconfigured("Advisory provider has no API key")

        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(**kwargs), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise UpstreamTimeout(f"Completion timed out after {self.timeout}s", source="groq")

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise UpstreamError("Empty completion", source="groq")
        return content.strip()

    async def classify_sentiment(self, items):
        """BULLISH/BEARISH/NEUTRAL for a list of news items; NEUTRAL on any failure."""
        if not items or not self.is_available():
            return Sentiment.NEUTRAL

        text = "\n".join(f"{n.title}: {n.summary}" for n in items)
        try:
            label = await self.complete(
                SENTIMENT_SYSTEM_PROMPT,
                f"Analyze the overall sentiment of this crypto news:\n{text}",
                max_tokens=10,
                temperature=0.1,
            )
        except Exception as e:
            logger.warning(f"Sentiment classification failed: {e}")
            return Sentiment.NEUTRAL

        try:
            return Sentiment(label.strip().strip(".").upper())
        except ValueError:
            logger.debug(f"Unrecognised sentiment label {label!r}, defaulting to NEUTRAL")
            return Sentiment.NEUTRAL

    async def answer(self, query):
        return await self.complete(ANSWER_SYSTEM_PROMPT, query, max_tokens=500, temperature=0.3)

    async def close(self):
        if self.client is not None and hasattr(self.client, "close"):
            await self.client.close()
