"""Timeout racing helpers."""
import asyncio
import logging

logger = logging.getLogger("signalscan.concurrency")


async def first_of(coro, timeout, fallback, label=""):
    """Race ``coro`` against a ``timeout`` timer.

    Returns the coroutine's result if it finishes in time. On timeout or any
    exception the coroutine is abandoned (cancellation is best-effort) and
    ``fallback(exc)`` is awaited instead, receiving the exception that ended
    the primary attempt.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning(f"{label or 'task'}: timed out after {timeout:.1f}s, using fallback")
        return await fallback(e)
    except Exception as e:
        logger.warning(f"{label or 'task'}: failed ({e}), using fallback")
        return await fallback(e)
