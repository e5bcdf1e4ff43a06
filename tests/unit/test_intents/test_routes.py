"""Unit tests for route declarations."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from shared_intent.intents.routes import RouteDeclaration, declare_routes


@pytest.mark.unit
class TestRouteDeclaration:
    """Test suite for RouteDeclaration."""

    def test_control_message(self):
        """Test the control message carries the destination exchange."""
        route = RouteDeclaration(intents="chime.testing", data_types="chime.string")

        assert route.to_control_message("EchoServiceExchange") == {
            "intents": "chime.testing",
            "data_types": "chime.string",
            "exchange": "EchoServiceExchange",
        }

    def test_list_values_pass_through(self):
        """Test list-valued fields are kept as lists."""
        route = RouteDeclaration(intents=["a", "b"], data_types=["c"])

        assert route.to_control_message("X")["intents"] == ["a", "b"]

    def test_both_fields_required(self):
        """Test a declaration needs intents and data_types."""
        with pytest.raises(ValidationError):
            RouteDeclaration(intents="chime.testing")

    def test_frozen(self):
        """Test declarations are immutable."""
        route = RouteDeclaration(intents="a", data_types="b")

        with pytest.raises(ValidationError):
            route.intents = "c"


@pytest.mark.unit
class TestDeclareRoutes:
    """Test suite for declare_routes."""

    def test_accepts_dicts_and_models(self):
        """Test dicts are validated and models pass through, in order."""
        model = RouteDeclaration(intents="b", data_types="y")
        routes = declare_routes({"intents": "a", "data_types": "x"}, model)

        assert isinstance(routes, tuple)
        assert routes[0] == RouteDeclaration(intents="a", data_types="x")
        assert routes[1] is model

    def test_empty(self):
        """Test no routes is an empty tuple."""
        assert declare_routes() == ()
