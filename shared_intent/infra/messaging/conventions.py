"""Exchange, queue and routing key naming conventions.

Every intent service owns a topic exchange and a queue whose names derive from
the service name, and shares one router exchange with every other service:

    EchoService -> EchoServiceExchange / EchoServiceQueue
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

RESPONSE_ROUTING_KEY: str = ""
"""Routing key of data responses published to the router exchange."""

EXCHANGE_SUFFIX = "Exchange"
QUEUE_SUFFIX = "Queue"


def get_exchange_name(service_name: str) -> str:
    """Name of the exchange a service receives on.

    Example:
        >>> get_exchange_name("EchoService")
        'EchoServiceExchange'
    """
    return f"{service_name}{EXCHANGE_SUFFIX}"


def get_queue_name(service_name: str) -> str:
    """Name of the queue a service consumes from.

    Example:
        >>> get_queue_name("EchoService")
        'EchoServiceQueue'
    """
    return f"{service_name}{QUEUE_SUFFIX}"


@dataclass(frozen=True, slots=True)
class ServiceIdentity:
    """Topology identity of a service, stable for the lifetime of its type."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Service name must not be empty"
            raise ValueError(msg)

    @classmethod
    def of(cls, handler: Any) -> ServiceIdentity:
        """Derive the identity from a handler class or instance's class name."""
        handler_cls = handler if isinstance(handler, type) else type(handler)
        return cls(handler_cls.__name__)

    @property
    def exchange_name(self) -> str:
        return get_exchange_name(self.name)

    @property
    def queue_name(self) -> str:
        return get_queue_name(self.name)
