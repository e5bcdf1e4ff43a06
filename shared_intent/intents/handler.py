"""The handler contract services implement, and the metadata handed to it."""

from __future__ import annotations

from collections.abc import Awaitable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aio_pika.abc import AbstractIncomingMessage

Envelope = dict[str, Any]
HandlerResult = Mapping[Any, Any] | Iterable[Any] | None


@dataclass(frozen=True, slots=True)
class DeliveryInfo:
    """Where a delivery came from and how the broker handed it over."""

    consumer_tag: str | None = None
    delivery_tag: int | None = None
    redelivered: bool = False
    exchange: str | None = None
    routing_key: str | None = None

    @classmethod
    def from_message(cls, message: AbstractIncomingMessage) -> DeliveryInfo:
        return cls(
            consumer_tag=message.consumer_tag,
            delivery_tag=message.delivery_tag,
            redelivered=bool(message.redelivered),
            exchange=message.exchange,
            routing_key=message.routing_key,
        )


@dataclass(frozen=True, slots=True)
class MessageMetadata:
    """AMQP properties of a delivery."""

    content_type: str | None = None
    content_encoding: str | None = None
    headers: dict[str, Any] = field(default_factory=dict)
    correlation_id: str | None = None
    reply_to: str | None = None
    message_id: str | None = None
    timestamp: datetime | None = None
    type: str | None = None
    app_id: str | None = None

    @classmethod
    def from_message(cls, message: AbstractIncomingMessage) -> MessageMetadata:
        return cls(
            content_type=message.content_type,
            content_encoding=message.content_encoding,
            headers=dict(message.headers or {}),
            correlation_id=message.correlation_id,
            reply_to=message.reply_to,
            message_id=message.message_id,
            timestamp=message.timestamp,
            type=message.type,
            app_id=message.app_id,
        )


@runtime_checkable
class MessageHandler(Protocol):
    """Business logic of an intent service.

    ``handle_message`` receives the decoded, validated envelope and returns a
    response mapping, an iterable of them, or None/an empty iterable for no
    response. Responses must carry ``intents``, ``data_types`` and ``data``;
    ``routing`` is filled in from the envelope. It may be a coroutine.

    Example:
        class EchoService:
            routes = declare_routes({"intents": "chime.echo", "data_types": "chime.string"})

            async def handle_message(self, delivery, metadata, envelope):
                return {"intents": "chime.echo", "data_types": "chime.string",
                        "data": envelope["data"]}
    """

    def handle_message(
        self,
        delivery: DeliveryInfo,
        metadata: MessageMetadata,
        envelope: Envelope,
    ) -> HandlerResult | Awaitable[HandlerResult]: ...
