"""Context management for structured logging.

Provides automatic context injection into log records using contextvars, so
the routing identifiers of the delivery being processed appear on every log
line emitted while it is handled, without passing them around explicitly.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import logging
from typing import Any

# Each async task gets its own copy automatically
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for the current async task.

    Example:
        ```python
        set_log_context(conversation_id="c-1", user_id="u-1")
        logger.info("Handling message")  # Includes conversation_id and user_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current async task."""
    _log_context.set({})


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind context for the duration of a block, restoring the previous context after.

    Example:
        ```python
        with log_context(conversation_id="c-1"):
            logger.info("inside")   # has conversation_id
        logger.info("outside")      # does not
        ```
    """
    token = _log_context.set({**_log_context.get(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Logging filter that injects the contextvar context into each LogRecord.

    Attached to the root queue handler, so every logger benefits. Existing record
    attributes are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
