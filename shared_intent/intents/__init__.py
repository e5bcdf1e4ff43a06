"""Intent service building blocks.

- handler: the MessageHandler contract and delivery metadata types
- envelope: inbound validation and outbound routing attachment
- dispatcher: the per-delivery pipeline
- registrar: startup route announcements
- runtime: wiring and lifecycle
"""

from __future__ import annotations

from shared_intent.intents.dispatcher import Dispatcher
from shared_intent.intents.envelope import (
    coerce_responses,
    decode_envelope,
    encode_responses,
    finalize_responses,
    normalize_and_attach_routing,
    validate_inbound,
)
from shared_intent.intents.handler import DeliveryInfo, Envelope, MessageHandler, MessageMetadata
from shared_intent.intents.registrar import RouteRegistrar
from shared_intent.intents.routes import RouteDeclaration, declare_routes
from shared_intent.intents.runtime import ServiceRuntime, run_service

__all__ = [
    "DeliveryInfo",
    "Dispatcher",
    "Envelope",
    "MessageHandler",
    "MessageMetadata",
    "RouteDeclaration",
    "RouteRegistrar",
    "ServiceRuntime",
    "coerce_responses",
    "decode_envelope",
    "encode_responses",
    "declare_routes",
    "finalize_responses",
    "normalize_and_attach_routing",
    "run_service",
    "validate_inbound",
]
