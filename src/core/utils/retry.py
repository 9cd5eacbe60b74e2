"""
Retry utilities with exponential backoff.

Used at the HTTP layer only, for connection failures. A request GitHub
answered, even with an error, is never retried.
"""

import asyncio
from collections.abc import Callable
from functools import wraps
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Any:
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_retries: Maximum number of attempts
        initial_delay: Initial delay in seconds before first retry
        max_delay: Maximum delay in seconds between retries
        exponential_base: Base for exponential backoff calculation
        exceptions: Tuple of exception types to catch and retry on

    Returns:
        Decorated async function with retry logic

    Example:
        @retry_with_backoff(max_retries=3, exceptions=(aiohttp.ClientConnectionError,))
        async def fetch_data():
            return await api_call()
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay

            for attempt in range(1, max_retries + 1):
                try:
                    result = await func(*args, **kwargs)
                    if attempt > 1:
                        logger.info("retry_succeeded", function=func.__name__, attempt=attempt)
                    return result
                except exceptions as e:
                    if attempt == max_retries:
                        logger.error("retry_exhausted", function=func.__name__, attempts=max_retries, error=str(e))
                        raise

                    wait_time = min(delay, max_delay)
                    logger.warning(
                        "retry_scheduled",
                        function=func.__name__,
                        attempt=attempt,
                        max_retries=max_retries,
                        wait_seconds=wait_time,
                        error=str(e),
                    )
                    await asyncio.sleep(wait_time)
                    delay *= exponential_base

            raise RuntimeError(f"{func.__name__} was not attempted (max_retries={max_retries})")

        return wrapper

    return decorator
