"""Utility modules for the signal scanner."""
from utils.logger import setup_logging
from utils.formatters import format_price, format_usd, format_pct, format_compact, confidence_color, time_ago
from utils.rate_limiter import RateLimiter
from utils.cache import TTLCache
from utils.http_client import HTTPClient, UpstreamError, UpstreamTimeout
from utils.concurrency import first_of
