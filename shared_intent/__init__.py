"""Reusable intent service runtime for RabbitMQ-routed conversational services."""

from shared_intent.intents import (
    DeliveryInfo,
    MessageHandler,
    MessageMetadata,
    RouteDeclaration,
    ServiceRuntime,
    declare_routes,
    run_service,
)

__version__ = "0.1.0"

__all__ = [
    "DeliveryInfo",
    "MessageHandler",
    "MessageMetadata",
    "RouteDeclaration",
    "ServiceRuntime",
    "__version__",
    "declare_routes",
    "run_service",
]
