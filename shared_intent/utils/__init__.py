"""Shared helpers."""

from shared_intent.utils.retry import RetryError, RetryStrategy, retry

__all__ = ["RetryError", "RetryStrategy", "retry"]
