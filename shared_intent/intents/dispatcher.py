"""Per-delivery pipeline: decode, validate, handle, validate responses, publish.

A delivery is processed all-or-nothing: every response the handler returns
is validated and JSON-encoded before the first one is published, so a bad response never
leaves a partial set of responses on the router exchange.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from shared_intent.core.exceptions import HandlerNotRegisteredError
from shared_intent.infra.logging.context import log_context
from shared_intent.intents.envelope import (
    decode_envelope,
    encode_responses,
    finalize_responses,
    routing_ids,
    validate_inbound,
)
from shared_intent.intents.handler import DeliveryInfo, MessageMetadata

if TYPE_CHECKING:
    from aio_pika.abc import AbstractIncomingMessage

    from shared_intent.infra.messaging.publisher import RouterPublisher
    from shared_intent.intents.handler import MessageHandler

logger = logging.getLogger(__name__)


class Dispatcher:
    """Runs a service's handler over deliveries and publishes what it returns."""

    def __init__(
        self,
        handler: MessageHandler | None,
        publisher: RouterPublisher | None = None,
        *,
        service_name: str | None = None,
    ) -> None:
        self.handler = handler
        self.publisher = publisher
        if service_name is None and handler is not None:
            service_name = type(handler).__name__
        self.service_name = service_name

    def ensure_handler(self) -> MessageHandler:
        """Return the handler, failing if the service has none."""
        if self.handler is None or not callable(getattr(self.handler, "handle_message", None)):
            raise HandlerNotRegisteredError
        return self.handler

    async def handle(
        self,
        delivery: DeliveryInfo,
        metadata: MessageMetadata,
        body: bytes | str | None,
    ) -> list[dict[str, Any]]:
        """Turn one delivery body into the routed responses to publish."""
        handler = self.ensure_handler()
        logger.info("Received delivery", extra={"from_queue": _preview(body), "service": self.service_name})

        envelope = decode_envelope(body)
        validate_inbound(envelope)

        with log_context(**routing_ids(envelope)):
            result = handler.handle_message(delivery, metadata, envelope)
            if inspect.isawaitable(result):
                result = await result

            responses = finalize_responses(envelope, result)
            logger.info(
                "Handler produced responses",
                extra={"to_queue": responses, "count": len(responses), "service": self.service_name},
            )
        return responses

    async def dispatch(
        self,
        delivery: DeliveryInfo,
        metadata: MessageMetadata,
        body: bytes | str | None,
    ) -> list[dict[str, Any]]:
        """Handle one delivery and publish its responses in handler order."""
        responses = await self.handle(delivery, metadata, body)
        bodies = encode_responses(responses)
        if bodies and self.publisher is None:
            msg = "Dispatcher has no publisher"
            raise RuntimeError(msg)
        for encoded in bodies:
            await self.publisher.publish_body(encoded)
        return responses

    async def dispatch_message(self, message: AbstractIncomingMessage) -> list[dict[str, Any]]:
        """Dispatch an aio-pika delivery."""
        return await self.dispatch(
            DeliveryInfo.from_message(message),
            MessageMetadata.from_message(message),
            message.body,
        )


def _preview(body: bytes | str | None) -> str | None:
    if isinstance(body, bytes | bytearray):
        return body.decode("utf-8", errors="replace")
    return body
