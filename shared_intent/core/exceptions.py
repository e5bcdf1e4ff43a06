"""Custom exception classes for intent services.

Every failure raised while validating or dispatching an envelope derives from
IntentServiceError so consumers can separate malformed-message errors from
transport errors. None of these are retried: they indicate a malformed message
or a handler bug.
"""

from __future__ import annotations

import json
from typing import Any

INTENT_KEYS: tuple[str, ...] = ("intents", "data_types", "data")
"""Keys every outbound response must carry to be routable."""


class IntentServiceError(Exception):
    """Base intent service exception.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier, stable across releases.
        extra: Additional context-specific information about the error.

    Example:
            raise IntentServiceError(
            detail="Payload missing routing",
            type="missing-routing",
            extra={"payload": payload},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "intent-service-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize intent service exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type
        self.extra = extra or {}
        super().__init__(detail)

    def __str__(self) -> str:
        return self.detail


# ──────────────────────────────────────────────────────────────────────────────
# Inbound envelope errors
# ──────────────────────────────────────────────────────────────────────────────


class InboundEnvelopeError(IntentServiceError):
    """An inbound envelope failed structural validation."""


class EnvelopeDecodeError(InboundEnvelopeError):
    """Raised when a delivery body is not a UTF-8 JSON object."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail=detail, type="envelope-decode-error", extra=extra)


class MissingRoutingError(InboundEnvelopeError):
    """Raised when an envelope has no routing block."""

    def __init__(self, payload: Any) -> None:
        super().__init__(
            detail=f"Payload missing routing {payload}",
            type="missing-routing",
            extra={"payload": payload},
        )


class MissingConversationIdError(InboundEnvelopeError):
    """Raised when routing.conversation.id is absent."""

    def __init__(self) -> None:
        super().__init__(detail="Payload missing convo id", type="missing-conversation-id")


class MissingUserIdError(InboundEnvelopeError):
    """Raised when routing.user.id is absent."""

    def __init__(self) -> None:
        super().__init__(detail="Payload missing user id", type="missing-user-id")


# ──────────────────────────────────────────────────────────────────────────────
# Outbound response errors
# ──────────────────────────────────────────────────────────────────────────────


class OutboundResponseError(IntentServiceError):
    """A handler returned something that cannot be routed."""


class NoResponseError(OutboundResponseError):
    """Raised when the handler produced a null response."""

    def __init__(self) -> None:
        super().__init__(detail="No response provided", type="no-response")


class ResponseNotMappingError(OutboundResponseError):
    """Raised when a response is not a mapping."""

    def __init__(self, response: Any) -> None:
        super().__init__(
            detail=(
                "Response must be a routable intent hash with: "
                f"{json.dumps(list(INTENT_KEYS))}, but was: {response!r}"
            ),
            type="response-not-mapping",
            extra={"response": response},
        )


class MissingIntentKeysError(OutboundResponseError):
    """Raised when a response lacks some of the routable intent keys.

    Attributes:
        missing: The missing keys, in canonical order.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            detail=f"Response must be a routable intent hash. Missing: {json.dumps(missing)}",
            type="missing-intent-keys",
            extra={"missing": missing},
        )


class ResponseEncodeError(OutboundResponseError):
    """Raised when a routed response cannot be serialized to JSON."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            detail=f"Response is not JSON serializable: {reason}",
            type="response-not-serializable",
            extra={"reason": reason},
        )


# ──────────────────────────────────────────────────────────────────────────────
# Programming errors
# ──────────────────────────────────────────────────────────────────────────────


class RoutingNotFoundError(IntentServiceError, KeyError):
    """Raised when routing is attached from an envelope that has none.

    Reaching this means inbound validation was skipped, so it is reported as a
    lookup failure rather than as an envelope error.
    """

    def __init__(self, key: str = "routing") -> None:
        super().__init__(detail=f'key not found: "{key}"', type="routing-not-found")


class HandlerNotRegisteredError(IntentServiceError):
    """Raised when a service runs without a message handler."""

    def __init__(self) -> None:
        super().__init__(detail="You must define handle_message", type="handler-not-registered")
