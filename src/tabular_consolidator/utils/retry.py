"""Shared retry decorator for OpenAI API calls.

Wraps the enrichment and report-assistant calls so transient rate limits,
timeouts and connection drops are retried with random exponential backoff.
Callers catch ``tenacity.RetryError`` once the attempts are exhausted.
"""

from __future__ import annotations

import logging

import openai
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

# tenacity's before_sleep_log requires a stdlib logger, NOT structlog.
_tenacity_logger = logging.getLogger("tabular_consolidator.retry")

RETRYABLE_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
)


def is_retryable_error(exc: BaseException) -> bool:
    """Check if an exception is a transient OpenAI error.

    Args:
        exc: The exception to inspect.

    Returns:
        True for rate limits, timeouts and connection errors.
    """
    return isinstance(exc, RETRYABLE_ERRORS)


openai_retry = retry(
    retry=retry_if_exception(is_retryable_error),
    stop=stop_after_attempt(3),
    wait=wait_random_exponential(multiplier=2, min=1, max=60),
    before_sleep=before_sleep_log(_tenacity_logger, logging.WARNING),
)
"""Retry decorator for ``AsyncOpenAI`` chat completion calls.

3 attempts, random exponential backoff with ``multiplier=2`` capped at 60s.
"""
