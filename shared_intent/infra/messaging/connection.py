"""RabbitMQ connection management.

One connection per service runtime, opened lazily on first use. Opening
retries with a constant backoff for as long as the overall connection budget
allows, or for at most ``max_attempts`` tries when one is given. When either
limit is hit the last connection error is raised (or TimeoutError if no
attempt has completed yet).

Usage:
    connections = ConnectionManager(get_rabbit_settings())
    connection = await connections.get_connection()
    ...
    await connections.close()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import aio_pika

from shared_intent.core.settings import get_rabbit_settings
from shared_intent.utils.retry import RetryError, retry

if TYPE_CHECKING:
    from aio_pika.abc import AbstractRobustConnection

    from shared_intent.core.settings import RabbitSettings

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Owns the broker connection of one service runtime."""

    def __init__(self, settings: RabbitSettings | None = None, max_attempts: int | None = None) -> None:
        self.settings = settings or get_rabbit_settings()
        self.max_attempts = max_attempts
        self._connection: AbstractRobustConnection | None = None

    @property
    def is_connected(self) -> bool:
        """Whether a live connection is currently held."""
        return self._connection is not None and not self._connection.is_closed

    async def get_connection(self) -> AbstractRobustConnection:
        """Return the connection, opening it on first call.

        Raises:
            Exception: The last connection error once ``connection_timeout``
                elapses or ``max_attempts`` tries have failed, or TimeoutError
                if no attempt failed before the timeout.
        """
        if self._connection is None:
            self._connection = await self._connect_with_retry()
        return self._connection

    async def _open(self) -> AbstractRobustConnection:
        return await aio_pika.connect_robust(
            self.settings.get_url(),
            client_properties={"connection_name": self.settings.connection_name},
        )

    async def _connect_with_retry(self) -> AbstractRobustConnection:
        last_exception: Exception | None = None

        def _record_failure(exc: Exception, attempt: int) -> None:
            nonlocal last_exception
            last_exception = exc
            logger.error(
                "RabbitMQ connection failed. Retrying.",
                extra={"attempt": attempt, "error": str(exc), **self.settings.describe()},
            )

        connect = retry(
            max_attempts=self.max_attempts,
            initial_delay=self.settings.retry_backoff,
            max_delay=self.settings.retry_backoff,
            exponential_base=1.0,
            jitter=False,
            on_retry=_record_failure,
        )(self._open)

        logger.info("Connecting to RabbitMQ", extra=self.settings.describe())
        try:
            async with asyncio.timeout(self.settings.connection_timeout):
                connection = await connect()
        except RetryError as e:
            raise e.last_exception from e
        except TimeoutError as timeout:
            if last_exception is not None:
                raise last_exception from timeout
            raise

        logger.info("RabbitMQ connection established", extra=self.settings.describe())
        return connection

    async def close(self) -> None:
        """Close the connection if one was opened. Safe to call repeatedly."""
        connection, self._connection = self._connection, None
        if connection is None:
            return
        if not connection.is_closed:
            await connection.close()
        logger.info("RabbitMQ connection closed")

    async def __aenter__(self) -> ConnectionManager:
        await self.get_connection()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
