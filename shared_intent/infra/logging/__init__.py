"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- Automatic context injection (conversation_id, user_id, ...)
- QueueHandler + QueueListener for non-blocking I/O

Basic usage:
    from shared_intent.infra.logging import log_context
    import logging

    logger = logging.getLogger(__name__)

    with log_context(conversation_id="c-1", user_id="u-1"):
        logger.info("Handling message")  # Includes both ids
"""

from shared_intent.infra.logging.config import configure_logging, setup_logging, shutdown
from shared_intent.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from shared_intent.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
