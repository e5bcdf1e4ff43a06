"""CLI utilities for running async operations and formatting output."""

from shared_intent.cli.utils.async_runner import coro
from shared_intent.cli.utils.formatters import error, info, success

__all__ = [
    "coro",
    "error",
    "info",
    "success",
]
