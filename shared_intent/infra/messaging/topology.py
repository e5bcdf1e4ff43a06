"""Exchange and queue provisioning for an intent service.

All exchanges are durable topic exchanges that survive the service. The
service queue is auto-deleted once its consumer disconnects. Each handle is
declared once and memoized; redeclaring an existing exchange or queue with
matching properties is a no-op on the broker, while conflicting properties
surface as a channel error from the broker.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aio_pika import ExchangeType

if TYPE_CHECKING:
    from aio_pika.abc import AbstractChannel, AbstractExchange, AbstractQueue

    from shared_intent.core.settings import RabbitSettings
    from shared_intent.infra.messaging.connection import ConnectionManager
    from shared_intent.infra.messaging.conventions import ServiceIdentity

logger = logging.getLogger(__name__)


class TopologyProvisioner:
    """Declares the router exchange and a service's own exchange and queue."""

    def __init__(
        self,
        connections: ConnectionManager,
        identity: ServiceIdentity,
        settings: RabbitSettings | None = None,
    ) -> None:
        self.connections = connections
        self.identity = identity
        self.settings = settings or connections.settings
        self._channel: AbstractChannel | None = None
        self._router_exchange: AbstractExchange | None = None
        self._self_queue: AbstractQueue | None = None

    async def get_channel(self) -> AbstractChannel:
        """The single channel used for consuming and publishing."""
        if self._channel is None:
            connection = await self.connections.get_connection()
            channel = await connection.channel()
            await channel.set_qos(prefetch_count=self.settings.prefetch_count)
            self._channel = channel
        return self._channel

    async def get_router_exchange(self) -> AbstractExchange:
        """The shared router exchange responses and registrations go through."""
        if self._router_exchange is None:
            channel = await self.get_channel()
            self._router_exchange = await channel.declare_exchange(
                self.settings.router_exchange_name,
                ExchangeType.TOPIC,
                durable=True,
                auto_delete=False,
            )
        return self._router_exchange

    async def get_self_queue(self) -> AbstractQueue:
        """The service queue, bound to the service exchange."""
        if self._self_queue is None:
            channel = await self.get_channel()
            exchange = await channel.declare_exchange(
                self.identity.exchange_name,
                ExchangeType.TOPIC,
                durable=True,
                auto_delete=False,
            )
            queue = await channel.declare_queue(
                self.identity.queue_name,
                auto_delete=True,
                arguments=self._queue_arguments(),
            )
            logger.info(
                "Declared service queue",
                extra={"queue": self.identity.queue_name, "exchange": self.identity.exchange_name},
            )
            await queue.bind(exchange, routing_key=self.settings.self_binding_key)
            self._self_queue = queue
        return self._self_queue

    def _queue_arguments(self) -> dict[str, Any] | None:
        if not self.settings.dead_letter_exchange:
            return None
        return {"x-dead-letter-exchange": self.settings.dead_letter_exchange}
