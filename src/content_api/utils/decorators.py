"""Decorators for timing and retrying storage and translation calls."""
import functools
import logging
import time
from typing import Any, Callable, Optional, Tuple, Type, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(func: F) -> F:
    """Log how long a synchronous call took, including when it raised."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        started = time.monotonic()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__qualname__} failed after {time.monotonic() - started:.2f}s: {e}")
            raise
        logger.debug(f"{func.__qualname__} completed in {time.monotonic() - started:.2f}s")
        return result
    return cast(F, wrapper)


def async_log_execution_time(func: F) -> F:
    """Coroutine flavour of :func:`log_execution_time`."""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        started = time.monotonic()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__qualname__} failed after {time.monotonic() - started:.2f}s: {e}")
            raise
        logger.info(f"{func.__qualname__} completed in {time.monotonic() - started:.2f}s")
        return result
    return cast(F, wrapper)


def retry(max_attempts: int = 3, delay: float = 0.5, backoff: float = 2.0,
          exceptions: Tuple[Type[BaseException], ...] = (Exception,),
          logger_name: Optional[str] = None):
    """Retry a synchronous call with exponential backoff.

    Args:
        max_attempts: Total number of attempts, including the first one
        delay: Seconds to wait before the second attempt
        backoff: Multiplier applied to the delay after every failed attempt
        exceptions: Exception types that trigger a retry; anything else propagates at once
        logger_name: Optional logger name (defaults to this module's logger)
    """
    retry_logger = logging.getLogger(logger_name) if logger_name else logger

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            current_delay = delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        retry_logger.error(f"All {max_attempts} attempts failed for {func.__qualname__}: {e}")
                        raise
                    retry_logger.warning(
                        f"Attempt {attempt}/{max_attempts} for {func.__qualname__} failed: {e}. "
                        f"Retrying in {current_delay:.2f}s"
                    )
                    time.sleep(current_delay)
                    current_delay *= backoff
        return cast(F, wrapper)

    return decorator
