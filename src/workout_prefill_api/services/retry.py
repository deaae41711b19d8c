"""Retry utilities for backend writes with exponential backoff."""
import re
import logging
from typing import Any, Callable, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 8

TRANSIENT_STATUS_CODES = ("429", "500", "502", "503", "504")
PERMANENT_STATUS_CODES = ("400", "401", "403", "404", "409", "422")

# Standalone three-digit number; "404" inside a row id does not count
STATUS_CODE_PATTERN = re.compile(r"(?<![\w-])([1-5]\d{2})(?![\w-])")


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if a backend error is worth retrying.

    Retryable errors include:
    - Rate limit errors (429)
    - Server errors (5xx)
    - Timeouts and connection/DNS failures

    Non-retryable errors include:
    - Auth failures (401/403)
    - Constraint and validation failures (400/409/422)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if "timeout" in exception_type or "timeout" in error_str or "timed out" in error_str:
        return True
    if "connect" in exception_type or "connection" in error_str:
        return True
    if "temporary failure in name resolution" in error_str or "name or service not known" in error_str:
        return True

    # The first standalone code is the response status
    codes = STATUS_CODE_PATTERN.findall(error_str)
    status = codes[0] if codes else None

    if status in PERMANENT_STATUS_CODES:
        return False
    if "rate" in error_str and "limit" in error_str:
        return True
    if status in TRANSIENT_STATUS_CODES:
        return True

    # Default: don't retry unknown errors
    return False


def retry_sync_call(
    func: Callable[..., T],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    **kwargs: Any,
) -> T:
    """
    Execute a sync function with retry logic.

    Args:
        func: Function to execute
        *args: Positional arguments for the function
        max_attempts: Maximum number of attempts
        min_wait_seconds: Minimum wait time between attempts
        max_wait_seconds: Maximum wait time between attempts
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function call

    Raises:
        Exception: The last error once attempts are exhausted, or the first
            non-retryable error
    """
    retrying = Retrying(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait_seconds, min=min_wait_seconds, max=max_wait_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return retrying(func, *args, **kwargs)
