"""Shared utilities."""

from tabular_consolidator.utils.retry import is_retryable_error, openai_retry

__all__ = ["is_retryable_error", "openai_retry"]
