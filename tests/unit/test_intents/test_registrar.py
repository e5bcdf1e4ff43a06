"""Unit tests for startup route registration."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from shared_intent.infra.messaging.conventions import ServiceIdentity
from shared_intent.intents.registrar import RouteRegistrar
from shared_intent.intents.routes import declare_routes


@pytest.fixture
def publisher():
    """RouterPublisher mock."""
    mock = MagicMock()
    mock.publish = AsyncMock(return_value=True)
    return mock


@pytest.mark.unit
class TestRouteRegistrar:
    """Test suite for RouteRegistrar."""

    async def test_publishes_control_message(self, publisher):
        """Test one route produces one add_route control message."""
        routes = declare_routes({"intents": "chime.testing", "data_types": "chime.string"})
        registrar = RouteRegistrar(routes, ServiceIdentity("TestSharedIntents"), publisher)

        await registrar.register_routes()

        publisher.publish.assert_awaited_once_with(
            {
                "intents": "chime.testing",
                "data_types": "chime.string",
                "exchange": "TestSharedIntentsExchange",
            },
            routing_key="add_route",
        )

    async def test_routes_published_in_order(self, publisher):
        """Test routes are announced in declaration order."""
        routes = declare_routes(
            {"intents": "a", "data_types": "x"},
            {"intents": "b", "data_types": "y"},
        )
        registrar = RouteRegistrar(routes, ServiceIdentity("Svc"), publisher)

        registered = await registrar.register_routes()

        assert [m["intents"] for m in registered] == ["a", "b"]
        assert [c.args[0]["intents"] for c in publisher.publish.await_args_list] == ["a", "b"]

    async def test_custom_routing_key(self, publisher):
        """Test the control routing key is configurable."""
        routes = declare_routes({"intents": "a", "data_types": "x"})
        registrar = RouteRegistrar(routes, ServiceIdentity("Svc"), publisher, routing_key="routes.add")

        await registrar.register_routes()

        assert publisher.publish.await_args.kwargs == {"routing_key": "routes.add"}

    async def test_no_routes(self, publisher):
        """Test nothing is published without routes."""
        registrar = RouteRegistrar((), ServiceIdentity("Svc"), publisher)

        assert await registrar.register_routes() == []
        publisher.publish.assert_not_awaited()
