"""RabbitMQ infrastructure for intent services.

- Connection: lazily opened, memoized connection with bounded retry
- Topology: router exchange, service exchange and service queue
- Publisher: JSON publishing to the router exchange
- Conventions: exchange and queue naming derived from the service name
"""

from __future__ import annotations

from shared_intent.infra.messaging.connection import ConnectionManager
from shared_intent.infra.messaging.conventions import (
    RESPONSE_ROUTING_KEY,
    ServiceIdentity,
    get_exchange_name,
    get_queue_name,
)
from shared_intent.infra.messaging.publisher import RouterPublisher, encode_payload
from shared_intent.infra.messaging.topology import TopologyProvisioner

__all__ = [
    "RESPONSE_ROUTING_KEY",
    "ConnectionManager",
    "RouterPublisher",
    "ServiceIdentity",
    "TopologyProvisioner",
    "encode_payload",
    "get_exchange_name",
    "get_queue_name",
]
