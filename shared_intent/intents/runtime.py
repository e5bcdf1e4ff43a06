"""Service runtime: wires connection, topology, dispatch and route registration.

Deliveries are handed by aio-pika's consumer callback to an in-process
queue, and a single consumer task drains it, running the whole dispatch
pipeline for one delivery before taking the next. Handlers are therefore
never re-entered and responses are published in delivery order.

Shutdown drains: the broker consumer is cancelled first, deliveries already
received get up to ``graceful_timeout`` seconds to finish, then the
connection is closed. Anything left unacknowledged is redelivered by the
broker.

Usage:
    runtime = ServiceRuntime(EchoService(), routes=EchoService.routes)
    run_service(runtime)  # blocks until SIGINT/SIGTERM
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import contextlib
import logging
import signal
from typing import TYPE_CHECKING, Any

from shared_intent.core.exceptions import HandlerNotRegisteredError, IntentServiceError
from shared_intent.core.settings import get_rabbit_settings
from shared_intent.infra.messaging.connection import ConnectionManager
from shared_intent.infra.messaging.conventions import ServiceIdentity
from shared_intent.infra.messaging.publisher import RouterPublisher
from shared_intent.infra.messaging.topology import TopologyProvisioner
from shared_intent.intents.dispatcher import Dispatcher
from shared_intent.intents.registrar import RouteRegistrar
from shared_intent.intents.routes import RouteDeclaration, declare_routes

if TYPE_CHECKING:
    from aio_pika.abc import AbstractIncomingMessage, AbstractQueue

    from shared_intent.core.settings import RabbitSettings
    from shared_intent.intents.handler import MessageHandler

logger = logging.getLogger(__name__)


class ServiceRuntime:
    """Runs one intent service against the broker."""

    def __init__(
        self,
        handler: MessageHandler | None,
        routes: Iterable[RouteDeclaration | dict[str, Any]] = (),
        *,
        identity: ServiceIdentity | None = None,
        settings: RabbitSettings | None = None,
        connections: ConnectionManager | None = None,
    ) -> None:
        if identity is None:
            if handler is None:
                raise HandlerNotRegisteredError
            identity = ServiceIdentity.of(handler)

        self.identity = identity
        self.settings = settings or get_rabbit_settings()
        self.routes = declare_routes(*routes)

        self.connections = connections or ConnectionManager(self.settings)
        self.topology = TopologyProvisioner(self.connections, identity, self.settings)
        self.publisher = RouterPublisher(self.topology)
        self.dispatcher = Dispatcher(handler, self.publisher, service_name=identity.name)
        self.registrar = RouteRegistrar(
            self.routes,
            identity,
            self.publisher,
            routing_key=self.settings.add_route_key,
        )

        self._queue: AbstractQueue | None = None
        self._consumer_tag: str | None = None
        self._deliveries: asyncio.Queue[AbstractIncomingMessage] | None = None
        self._consumer_task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._consumer_task is not None and not self._consumer_task.done()

    async def start(self) -> None:
        """Provision topology, start consuming, then announce routes."""
        self.dispatcher.ensure_handler()

        self._queue = await self.topology.get_self_queue()
        await self.topology.get_router_exchange()

        self._deliveries = asyncio.Queue()
        self._consumer_task = asyncio.create_task(
            self._consume(self._deliveries),
            name=f"{self.identity.name}-consumer",
        )
        self._consumer_tag = await self._queue.consume(self._deliveries.put)

        await self.registrar.register_routes()
        logger.info(
            "Service started",
            extra={"service": self.identity.name, "queue": self.identity.queue_name},
        )

    async def _consume(self, deliveries: asyncio.Queue[AbstractIncomingMessage]) -> None:
        while True:
            message = await deliveries.get()
            try:
                await self.process_delivery(message)
            finally:
                deliveries.task_done()

    async def process_delivery(self, message: AbstractIncomingMessage) -> list[dict[str, Any]]:
        """Dispatch one delivery, acking on success and rejecting on failure."""
        try:
            async with message.process(requeue=False):
                return await self.dispatcher.dispatch_message(message)
        except IntentServiceError as e:
            logger.exception(
                "Rejected delivery",
                extra={"service": self.identity.name, "error_type": e.type, "delivery_tag": message.delivery_tag},
            )
        except Exception:
            logger.exception(
                "Unexpected error while processing delivery",
                extra={"service": self.identity.name, "delivery_tag": message.delivery_tag},
            )
        return []

    def request_stop(self) -> None:
        """Ask a running ``run()`` to shut down."""
        self._stop_event.set()

    async def stop(self) -> None:
        """Stop consuming, drain received deliveries, close the connection."""
        if self._queue is not None and self._consumer_tag is not None:
            try:
                await self._queue.cancel(self._consumer_tag)
            except Exception as e:
                logger.warning("Failed to cancel consumer", extra={"error": str(e)})
            self._consumer_tag = None

        if self._deliveries is not None:
            try:
                await asyncio.wait_for(self._deliveries.join(), timeout=self.settings.graceful_timeout)
            except TimeoutError:
                logger.warning(
                    "Graceful shutdown timed out",
                    extra={"pending": self._deliveries.qsize(), "timeout": self.settings.graceful_timeout},
                )
            self._deliveries = None

        if self._consumer_task is not None:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
            self._consumer_task = None

        await self.connections.close()
        logger.info("Service stopped", extra={"service": self.identity.name})

    async def run(self) -> None:
        """Start, block until ``request_stop()``, then stop."""
        try:
            await self.start()
            await self._stop_event.wait()
        finally:
            await self.stop()

    async def __aenter__(self) -> ServiceRuntime:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()


def run_service(runtime: ServiceRuntime) -> None:
    """Run ``runtime`` until SIGINT or SIGTERM."""

    async def _main() -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, runtime.request_stop)
        await runtime.run()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_main())
    logger.info("Exiting", extra={"service": runtime.identity.name})
