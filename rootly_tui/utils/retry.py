"""Async retry decorator with exponential backoff for transient API errors.

Only errors flagged `retryable` (connection failures, rate limits, 5xx
responses) are retried. Authentication failures and other permanent
errors propagate immediately.
"""

import asyncio
import functools
import logging
import random
from typing import Any, Awaitable, Callable, TypeVar

from ..exceptions import ApiRateLimitError, RootlyTuiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compute_backoff(attempt: int, min_backoff: float, max_backoff: float) -> float:
    """Exponential backoff for the given 1-based attempt, plus up to 10% jitter."""
    backoff = min(min_backoff * (2 ** (attempt - 1)), max_backoff)
    return backoff + random.uniform(0, backoff * 0.1)


def retry(
    max_retries: int = 2,
    min_backoff: float = 0.5,
    max_backoff: float = 5.0,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that retries a coroutine function on transient failures.

    Args:
        max_retries: Maximum number of retry attempts.
        min_backoff: Backoff before the first retry, in seconds.
        max_backoff: Upper bound for any single backoff.

    Example:
        @retry(max_retries=2)
        async def fetch():
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except RootlyTuiError as e:
                    if not e.retryable:
                        raise
                    attempt += 1
                    if attempt > max_retries:
                        logger.warning(
                            "Max retries (%d) exceeded for %s: %s",
                            max_retries,
                            func.__name__,
                            e,
                        )
                        raise

                    sleep_time = compute_backoff(attempt, min_backoff, max_backoff)
                    if isinstance(e, ApiRateLimitError) and e.retry_after:
                        sleep_time = min(max(sleep_time, e.retry_after), max_backoff)

                    logger.debug(
                        "Retry %d/%d for %s after %.2fs: %s",
                        attempt,
                        max_retries,
                        func.__name__,
                        sleep_time,
                        e,
                    )
                    await asyncio.sleep(sleep_time)

        return wrapper

    return decorator
