"""Echo service demonstrating the handler contract.

Run it with:
    shared-intent run shared_intent.examples.echo:EchoService
"""

from __future__ import annotations

import logging
from typing import Any

from shared_intent.intents import DeliveryInfo, Envelope, MessageMetadata, declare_routes

logger = logging.getLogger(__name__)


class EchoService:
    """Replies to every ``chime.echo`` message with its own data."""

    routes = declare_routes({"intents": "chime.echo", "data_types": "chime.string"})

    async def handle_message(
        self,
        delivery: DeliveryInfo,
        metadata: MessageMetadata,
        envelope: Envelope,
    ) -> dict[str, Any]:
        logger.info("Echoing message", extra={"routing_key": delivery.routing_key})
        return {
            "intents": "chime.ActionIntent",
            "data_types": "chime.string",
            "data": envelope.get("data"),
        }
