"""Publishing JSON payloads to the router exchange."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import aio_pika

from shared_intent.infra.messaging.conventions import RESPONSE_ROUTING_KEY

if TYPE_CHECKING:
    from shared_intent.infra.messaging.topology import TopologyProvisioner

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"


def encode_payload(payload: Any) -> bytes:
    """Serialize a payload to UTF-8 JSON."""
    return json.dumps(payload).encode("utf-8")


class RouterPublisher:
    """Publishes payloads to the shared router exchange."""

    def __init__(self, topology: TopologyProvisioner) -> None:
        self.topology = topology

    async def publish(self, payload: Any, routing_key: str = RESPONSE_ROUTING_KEY) -> bool:
        """Publish ``payload`` as JSON.

        Returns:
            False when the payload was None and nothing was sent, else True.
        """
        if payload is None:
            logger.debug("Not publishing nil payload")
            return False
        await self.publish_body(encode_payload(payload), routing_key=routing_key)
        return True

    async def publish_body(self, body: bytes, routing_key: str = RESPONSE_ROUTING_KEY) -> None:
        """Publish an already JSON-encoded body."""
        exchange = await self.topology.get_router_exchange()
        message = aio_pika.Message(
            body=body,
            content_type=CONTENT_TYPE,
            content_encoding="utf-8",
        )
        await exchange.publish(message, routing_key=routing_key)
        logger.debug(
            "Published to router exchange",
            extra={"exchange": exchange.name, "routing_key": routing_key},
        )
