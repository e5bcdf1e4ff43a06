"""Unit tests for the async retry decorator."""
from __future__ import annotations

import pytest

from shared_intent.utils.retry import RetryError, RetryStrategy, retry


@pytest.mark.unit
class TestRetryDecorator:
    """Test suite for retry decorator."""

    async def test_retry_succeeds_first_attempt(self):
        """Test that retry decorator doesn't retry on success."""
        call_count = 0

        @retry(max_attempts=3)
        async def successful_func():
            nonlocal call_count
            call_count += 1
            return "success"

        assert await successful_func() == "success"
        assert call_count == 1

    async def test_retry_succeeds_after_retries(self):
        """Test that retry decorator retries until success."""
        call_count = 0

        @retry(max_attempts=3, initial_delay=0.01)
        async def eventually_successful():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ValueError("Not yet")
            return "success"

        assert await eventually_successful() == "success"
        assert call_count == 3

    async def test_retry_fails_after_max_attempts(self):
        """Test that retry raises RetryError after max attempts."""
        call_count = 0

        @retry(max_attempts=3, initial_delay=0.01)
        async def always_fails():
            nonlocal call_count
            call_count += 1
            raise ValueError("Always fails")

        with pytest.raises(RetryError) as exc_info:
            await always_fails()

        assert call_count == 3
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_exception, ValueError)
        assert "after 3 attempts" in str(exc_info.value)

    async def test_retry_only_retries_specified_exceptions(self):
        """Test that retry only retries specified exception types."""
        call_count = 0

        @retry(max_attempts=3, initial_delay=0.01, exceptions=(ValueError,))
        async def raises_type_error():
            nonlocal call_count
            call_count += 1
            raise TypeError("Not retryable")

        with pytest.raises(TypeError):
            await raises_type_error()

        assert call_count == 1

    async def test_on_retry_callback(self):
        """Test on_retry receives each failure with a one-based attempt."""
        seen = []

        @retry(max_attempts=3, initial_delay=0.01, on_retry=lambda exc, attempt: seen.append((str(exc), attempt)))
        async def always_fails():
            raise ValueError("nope")

        with pytest.raises(RetryError):
            await always_fails()

        assert seen == [("nope", 1), ("nope", 2)]


@pytest.mark.unit
class TestRetryStrategy:
    """Test suite for RetryStrategy."""

    def test_constant_backoff(self):
        """Test exponential_base=1 without jitter yields a constant delay."""
        strategy = RetryStrategy(initial_delay=0.5, exponential_base=1.0, jitter=False)

        assert [strategy.calculate_delay(n) for n in range(4)] == [0.5, 0.5, 0.5, 0.5]

    def test_delay_capped(self):
        """Test delays never exceed max_delay."""
        strategy = RetryStrategy(initial_delay=1.0, max_delay=5.0, jitter=False)

        assert strategy.calculate_delay(10) == 5.0

    def test_invalid_max_attempts(self):
        """Test max_attempts must be at least one."""
        with pytest.raises(ValueError):
            RetryStrategy(max_attempts=0)

    def test_unlimited_attempts_never_exhausted(self):
        """Test max_attempts=None leaves stopping to the caller."""
        strategy = RetryStrategy(max_attempts=None)

        assert not strategy.exhausted(1000)
        assert RetryStrategy(max_attempts=2).exhausted(1)
