import time
import functools
import logging
from typing import Callable, TypeVar
from .exceptions import LLMAPIError, LLMAuthenticationError

T = TypeVar('T')

LOGGER = logging.getLogger(__name__)


def with_retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: tuple = (Exception,)
):
    """
    Retry decorator with exponential backoff

    Args:
        max_attempts: Maximum number of retry attempts
        delay: Initial delay between retries (seconds)
        backoff: Multiplier for delay after each retry
        exceptions: Tuple of exceptions to catch
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except LLMAuthenticationError:
                    raise
                except exceptions as e:
                    if attempt < max_attempts - 1:
                        LOGGER.info(
                            "%s failed (%s), retrying in %.1fs",
                            func.__name__, e, current_delay
                        )
                        time.sleep(current_delay)
                        current_delay *= backoff
                    else:
                        raise LLMAPIError(
                            message=f"Failed after {max_attempts} attempts: {e}",
                            provider=getattr(e, "provider", ""),
                            error_type="retry_exhausted",
                            original_error=e
                        ) from e

            raise LLMAPIError(message="No attempts were made", error_type="retry_exhausted")

        return wrapper
    return decorator


def log_request(func: Callable[..., T]) -> Callable[..., T]:
    """Log API requests for debugging"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> T:
        provider = args[0].__class__.__name__ if args else "Unknown"
        LOGGER.debug("[%s] Calling %s", provider, func.__name__)

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            LOGGER.warning("[%s] %s failed: %s", provider, func.__name__, e)
            raise

        error = getattr(result, "error", None)
        if error:
            LOGGER.warning("[%s] %s returned an error: %s", provider, func.__name__, error)
        else:
            LOGGER.debug("[%s] %s succeeded", provider, func.__name__)
        return result

    return wrapper
