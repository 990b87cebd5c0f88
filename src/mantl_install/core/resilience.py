"""Retry helpers for key-value store clients.

The resolution core never retries on its own; store implementations wrap
their network calls with ``retry_with_backoff``.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_attempts: int = 3,
    initial_delay: float = 0.5,
    backoff_factor: float = 2.0,
    max_delay: float = 30.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator that retries a function with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts
        initial_delay: Initial delay in seconds
        backoff_factor: Multiplier for each retry
        max_delay: Maximum delay between retries
        exceptions: Tuple of exceptions to catch and retry
        sleep: Sleep function (injectable for tests)

    Example:
        @retry_with_backoff(max_attempts=3, initial_delay=0.5)
        def read_key():
            # May fail transiently
            pass
    """
    attempts = max(1, int(max_attempts))

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            delay = initial_delay
            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:  # type: ignore[misc]
                    if attempt == attempts:
                        logger.error(f"{func.__name__} failed after {attempts} attempts")
                        raise

                    logger.warning(f"{func.__name__} attempt {attempt}/{attempts} failed: {e}")
                    logger.debug(f"Retrying in {delay}s...")
                    sleep(delay)

                    # Exponential backoff
                    delay = min(delay * backoff_factor, max_delay)

            raise RuntimeError("Unreachable")  # Should never get here

        return wrapper
    return decorator


__all__ = ["retry_with_backoff"]
