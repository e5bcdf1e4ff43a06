"""Startup announcement of the routes a service handles."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shared_intent.infra.messaging.conventions import ServiceIdentity
    from shared_intent.infra.messaging.publisher import RouterPublisher
    from shared_intent.intents.routes import RouteDeclaration

logger = logging.getLogger(__name__)


class RouteRegistrar:
    """Publishes one ``add_route`` control message per declared route.

    Routes are independent, idempotent announcements; they are published in
    declaration order.
    """

    def __init__(
        self,
        routes: Sequence[RouteDeclaration],
        identity: ServiceIdentity,
        publisher: RouterPublisher,
        routing_key: str = "add_route",
    ) -> None:
        self.routes = tuple(routes)
        self.identity = identity
        self.publisher = publisher
        self.routing_key = routing_key

    async def register_route(self, route: RouteDeclaration) -> dict[str, Any]:
        message = route.to_control_message(self.identity.exchange_name)
        await self.publisher.publish(message, routing_key=self.routing_key)
        return message

    async def register_routes(self) -> list[dict[str, Any]]:
        """Announce every declared route and return the control messages sent."""
        registered = [await self.register_route(route) for route in self.routes]
        logger.info(
            "Registered routes",
            extra={"service": self.identity.name, "exchange": self.identity.exchange_name, "routes": registered},
        )
        return registered
