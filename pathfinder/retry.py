"""Exponential-backoff retry for the blocking HTTP calls made by adapters."""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable, Tuple, Type

from pathfinder.log import get_logger

log = get_logger(__name__)


def backoff_delay(attempt: int, base_delay: float, max_delay: float, backoff_factor: float, jitter: bool) -> float:
    """Delay before retrying after failed *attempt* (1-based), capped at *max_delay*."""
    delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable:
    """Retry the wrapped callable on *retryable* errors, re-raising the last one.

    Adapters run in worker threads, so sleeping between attempts never
    stalls the event loop that gathers the other sources.
    """

    def decorator(fn: Callable) -> Callable:
        name = getattr(fn, "__qualname__", repr(fn))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt >= max_attempts:
                        log.error("%s failed after %d attempts: %s", name, max_attempts, exc)
                        raise
                    delay = backoff_delay(attempt, base_delay, max_delay, backoff_factor, jitter)
                    log.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        name, attempt, max_attempts, exc, delay,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
