"""Async HTTP client with retries, caching, and rate limiting."""
import asyncio
import hashlib
import logging
import time

import aiohttp

from utils.cache import TTLCache

logger = logging.getLogger("signalscan.http")


class UpstreamError(Exception):
    """Upstream request failed: non-2xx status, transport error, or unparseable body."""
    def __init__(self, message, status_code=None, response_body=None, source=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.source = source


class UpstreamTimeout(UpstreamError):
    """Upstream call exceeded its time budget."""


class HTTPClient:
    """aiohttp-backed client with retry logic, rate limiting, and response caching."""

    RETRYABLE_STATUS = {429, 500, 502, 503, 504}
    NON_RETRYABLE_STATUS = {400, 401, 403, 404}

    def __init__(self, base_url, rate_limiter=None, timeout=5.0, max_retries=0, cache_ttl=0,
                 headers=None, source=None):
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter
        self.timeout = timeout
        self.max_retries = max_retries
        self.cache_ttl = cache_ttl
        self.source = source or self.base_url
        self._cache = TTLCache(default_ttl=cache_ttl) if cache_ttl > 0 else None
        self._headers = {"User-Agent": "SignalScan/1.0", "Accept": "application/json"}
        self._headers.update(headers or {})
        self.session = None

    async def _ensure_session(self):
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self._headers)
        return self.session

    async def get(self, path="", params=None, timeout=None, headers=None):
        """Make a GET request with retry and caching."""
        return await self._request("GET", path, params, timeout=timeout, headers=headers)

    def _cache_key(self, method, path, params):
        raw = f"{method}:{self.base_url}{path}:{sorted((params or {}).items())}"
        return hashlib.md5(raw.encode()).hexdigest()

    def _url(self, path):
        if not path:
            return self.base_url
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(self, method, path, params=None, timeout=None, headers=None):
        url = self._url(path)

        if self._cache is not None:
            cached = self._cache.get(self._cache_key(method, path, params))
            if cached is not None:
                return cached

        session = await self._ensure_session()
        budget = aiohttp.ClientTimeout(total=timeout or self.timeout)
        last_error = None

        for attempt in range(self.max_retries + 1):
            if self.rate_limiter:
                await self.rate_limiter.wait()

            try:
                start = time.monotonic()
                async with session.request(method, url, params=params, timeout=budget,
                                           headers=headers) as resp:
                    latency = int((time.monotonic() - start) * 1000)
                    logger.debug(f"{method} {url} → {resp.status} ({latency}ms)")

                    if resp.status == 200:
                        try:
                            data = await resp.json(content_type=None)
                        except ValueError:
                            data = await resp.text()
                        if self._cache is not None:
                            self._cache.set(self._cache_key(method, path, params), data)
                        return data

                    body = await resp.text()
                    if resp.status in self.NON_RETRYABLE_STATUS:
                        raise UpstreamError(
                            f"HTTP {resp.status} from {url}",
                            status_code=resp.status,
                            response_body=body,
                            source=self.source,
                        )

                    if resp.status in self.RETRYABLE_STATUS:
                        retry_after = resp.headers.get("Retry-After")
                        wait = float(retry_after) if retry_after else min(2 ** attempt * 0.5, 5)
                        last_error = UpstreamError(f"HTTP {resp.status} from {url}",
                                                   status_code=resp.status, response_body=body,
                                                   source=self.source)
                        if attempt < self.max_retries:
                            logger.warning(f"Retryable {resp.status} from {url}, waiting {wait:.1f}s "
                                           f"(attempt {attempt + 1})")
                            await asyncio.sleep(wait)
                        continue

                    raise UpstreamError(f"Unexpected HTTP {resp.status} from {url}",
                                        status_code=resp.status, response_body=body,
                                        source=self.source)

            except asyncio.TimeoutError:
                last_error = UpstreamTimeout(f"Timed out after {budget.total}s: {url}", source=self.source)
                logger.debug(f"{last_error} (attempt {attempt + 1})")
            except aiohttp.ClientError as e:
                last_error = UpstreamError(f"Request error for {url}: {e}", source=self.source)
                logger.debug(f"{last_error} (attempt {attempt + 1})")
                if attempt < self.max_retries:
                    await asyncio.sleep(min(2 ** attempt * 0.5, 5))

        raise last_error or UpstreamError(f"Max retries exceeded for {url}", source=self.source)

    async def close(self):
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None
