"""Tests for the OpenAI retry decorator.

Verifies that:
- openai_retry retries on RateLimitError, APITimeoutError, APIConnectionError
- Non-transient errors propagate on the first attempt
- tenacity.RetryError is raised once attempts are exhausted
"""

from __future__ import annotations

from unittest.mock import MagicMock

import openai
import pytest
import tenacity

from tabular_consolidator.utils.retry import is_retryable_error, openai_retry


def _rate_limit_error() -> openai.RateLimitError:
    return openai.RateLimitError(
        message="429 Too Many Requests",
        response=MagicMock(status_code=429),
        body=None,
    )


class TestRetryPredicate:
    """Tests for the retry predicate."""

    def test_rate_limit(self) -> None:
        assert is_retryable_error(_rate_limit_error()) is True

    def test_timeout(self) -> None:
        exc = openai.APITimeoutError(request=MagicMock())
        assert is_retryable_error(exc) is True

    def test_connection(self) -> None:
        exc = openai.APIConnectionError(request=MagicMock())
        assert is_retryable_error(exc) is True

    def test_non_retryable(self) -> None:
        assert is_retryable_error(ValueError("not retryable")) is False
        assert is_retryable_error(openai.OpenAIError("generic")) is False


class TestOpenAIRetryDecorator:
    """Tests for the openai_retry decorator."""

    @pytest.mark.asyncio
    async def test_retries_on_rate_limit(self) -> None:
        attempts = 0

        @openai_retry
        async def flaky_completion() -> str:
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise _rate_limit_error()
            return "success"

        result = await flaky_completion()
        assert result == "success"
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_raises_retry_error_after_max_attempts(self) -> None:
        @openai_retry
        async def always_times_out() -> str:
            raise openai.APITimeoutError(request=MagicMock())

        with pytest.raises(tenacity.RetryError):
            await always_times_out()

    @pytest.mark.asyncio
    async def test_does_not_retry_non_retryable(self) -> None:
        attempts = 0

        @openai_retry
        async def malformed_request() -> str:
            nonlocal attempts
            attempts += 1
            raise ValueError("not retryable")

        with pytest.raises(ValueError, match="not retryable"):
            await malformed_request()
        assert attempts == 1
