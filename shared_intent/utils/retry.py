"""Async retry decorator with pluggable backoff.

Used by the broker connection bootstrap, which retries with a constant delay
while an outer timeout bounds the whole sequence:

    @retry(max_attempts=None, initial_delay=0.5, exponential_base=1.0, jitter=False)
    async def connect() -> Connection: ...
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
import logging
import random
from typing import ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class RetryError(Exception):
    """Error raised after exhausting retry attempts."""

    def __init__(self, last_exception: Exception, attempts: int) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        super().__init__(f"Failed after {attempts} attempts. Last error: {last_exception}")


class RetryStrategy:
    """Decides whether to retry and how long to wait between attempts.

    ``max_attempts=None`` never gives up on its own; bound it with an outer
    timeout.
    """

    def __init__(
        self,
        max_attempts: int | None = 3,
        initial_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        exceptions: tuple[type[Exception], ...] = (Exception,),
    ) -> None:
        if max_attempts is not None and max_attempts < 1:
            msg = f"max_attempts must be at least 1 or None, got {max_attempts}"
            raise ValueError(msg)
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.exceptions = exceptions

    def should_retry(self, exception: Exception) -> bool:
        return isinstance(exception, self.exceptions)

    def exhausted(self, attempt: int) -> bool:
        """Whether no further attempt is allowed after the zero-based ``attempt``."""
        return self.max_attempts is not None and attempt >= self.max_attempts - 1

    def calculate_delay(self, attempt: int) -> float:
        delay = min(self.initial_delay * (self.exponential_base**attempt), self.max_delay)
        if self.jitter:
            delay *= random.uniform(0.5, 1.5)
        return delay


def retry(
    max_attempts: int | None = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    on_retry: Callable[[Exception, int], None] | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable on failure.

    Non-retryable exceptions propagate unchanged. When attempts run out a
    RetryError wrapping the last exception is raised. ``on_retry`` is called
    with the exception and the one-based attempt number before each wait.
    """
    strategy = RetryStrategy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
        jitter=jitter,
        exceptions=exceptions,
    )

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            attempt = 0

            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not strategy.should_retry(e):
                        raise

                    if strategy.exhausted(attempt):
                        logger.error(
                            f"All retry attempts exhausted for {func.__name__}",
                            extra={"function": func.__name__, "attempts": attempt + 1, "last_exception": str(e)},
                        )
                        raise RetryError(e, attempt + 1) from e

                    if on_retry:
                        on_retry(e, attempt + 1)

                    delay = strategy.calculate_delay(attempt)
                    logger.debug(
                        f"Retrying {func.__name__} after {delay:.2f}s (attempt {attempt + 1})",
                        extra={"function": func.__name__, "attempt": attempt + 1, "delay": delay},
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return async_wrapper

    return decorator
