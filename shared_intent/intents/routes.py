"""Route declarations announced to the router at startup."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RouteDeclaration(BaseModel):
    """An (intents, data_types) pair a service wants routed to it.

    Example:
        route = RouteDeclaration(intents="chime.testing", data_types="chime.string")
        route.to_control_message("EchoServiceExchange")
        # {"intents": "chime.testing", "data_types": "chime.string",
        #  "exchange": "EchoServiceExchange"}
    """

    model_config = ConfigDict(frozen=True)

    intents: Any = Field(description="Intent name, or list of names, to route here")
    data_types: Any = Field(description="Data type name, or list of names, to route here")

    def to_control_message(self, exchange: str) -> dict[str, Any]:
        """Registration payload advertising ``exchange`` as the destination."""
        return {**self.model_dump(), "exchange": exchange}


def declare_routes(*routes: RouteDeclaration | dict[str, Any]) -> tuple[RouteDeclaration, ...]:
    """Build an immutable route list, accepting plain dicts for brevity.

    Example:
        ROUTES = declare_routes({"intents": "chime.testing", "data_types": "chime.string"})
    """
    return tuple(
        route if isinstance(route, RouteDeclaration) else RouteDeclaration.model_validate(route)
        for route in routes
    )
