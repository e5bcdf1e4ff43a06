"""Envelope decoding and validation.

Inbound envelopes must carry a routing block identifying the conversation
and the user. Outbound responses must be routable intent mappings and get the
inbound routing block attached verbatim before they are published.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
from typing import Any

from shared_intent.core.exceptions import (
    INTENT_KEYS,
    EnvelopeDecodeError,
    MissingConversationIdError,
    MissingIntentKeysError,
    MissingRoutingError,
    MissingUserIdError,
    NoResponseError,
    ResponseEncodeError,
    ResponseNotMappingError,
    RoutingNotFoundError,
)
from shared_intent.infra.messaging.publisher import encode_payload
from shared_intent.intents.handler import Envelope

ROUTING_KEY = "routing"


def decode_envelope(body: bytes | str | None) -> Envelope:
    """Decode a UTF-8 JSON delivery body.

    An empty body or a JSON ``null`` decodes to an empty envelope.

    Raises:
        EnvelopeDecodeError: If the body is not valid JSON or not an object.
    """
    if body is None:
        return {}
    try:
        text = body.decode("utf-8") if isinstance(body, bytes | bytearray) else body
        if not text.strip():
            return {}
        decoded = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise EnvelopeDecodeError(f"Payload is not valid JSON: {e}") from e

    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise EnvelopeDecodeError(
            f"Payload must be a JSON object, got {type(decoded).__name__}",
            extra={"payload": decoded},
        )
    return decoded


def validate_inbound(envelope: Mapping[str, Any]) -> None:
    """Check that an envelope carries routing.conversation.id and routing.user.id.

    Checks run in that order; the first failure is raised.
    """
    if ROUTING_KEY not in envelope:
        raise MissingRoutingError(envelope)
    routing = envelope[ROUTING_KEY] or {}
    if "id" not in _section(routing, "conversation"):
        raise MissingConversationIdError
    if "id" not in _section(routing, "user"):
        raise MissingUserIdError


def _section(routing: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(routing, Mapping):
        return {}
    section = routing.get(name)
    return section if isinstance(section, Mapping) else {}


def routing_ids(envelope: Mapping[str, Any]) -> dict[str, Any]:
    """Conversation and user ids of a validated envelope, for log context."""
    routing = envelope.get(ROUTING_KEY) or {}
    return {
        "conversation_id": _section(routing, "conversation").get("id"),
        "user_id": _section(routing, "user").get("id"),
    }


def normalize_response(response: Any) -> dict[str, Any]:
    """Check a handler response is routable and return it with string keys.

    Raises:
        NoResponseError: If ``response`` is None.
        ResponseNotMappingError: If ``response`` is not a mapping.
        MissingIntentKeysError: If any of intents, data_types, data is missing.
    """
    if response is None:
        raise NoResponseError
    if not isinstance(response, Mapping):
        raise ResponseNotMappingError(response)

    # Later keys win when two keys stringify to the same value
    normalized = {str(key): value for key, value in response.items()}
    missing = [key for key in INTENT_KEYS if key not in normalized]
    if missing:
        raise MissingIntentKeysError(missing)
    return normalized


def normalize_and_attach_routing(original: Mapping[str, Any], response: Any) -> dict[str, Any]:
    """Validate ``response`` and stamp it with ``original``'s routing block.

    Raises:
        RoutingNotFoundError: If ``original`` has no routing block.
    """
    normalized = normalize_response(response)
    try:
        routing = original[ROUTING_KEY]
    except KeyError:
        raise RoutingNotFoundError(ROUTING_KEY) from None
    return {**normalized, ROUTING_KEY: routing}


def coerce_responses(result: Any) -> list[Any]:
    """Turn a handler's return value into a list of response candidates."""
    if result is None:
        return []
    if isinstance(result, Mapping | str | bytes):
        return [result]
    if isinstance(result, Iterable):
        return list(result)
    return [result]


def finalize_responses(original: Mapping[str, Any], result: Any) -> list[dict[str, Any]]:
    """Validate every candidate of a handler result before any is published."""
    return [normalize_and_attach_routing(original, candidate) for candidate in coerce_responses(result)]


def encode_responses(responses: Iterable[Any]) -> list[bytes]:
    """JSON-encode every finalized response, failing before any is sent.

    Raises:
        ResponseEncodeError: If any response holds a value JSON cannot represent.
    """
    try:
        return [encode_payload(response) for response in responses]
    except (TypeError, ValueError) as e:
        raise ResponseEncodeError(str(e)) from e
