"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings defaults so tests never reach a real broker
    - Envelope Fixtures: inbound envelopes and handler responses
    - Broker Fixtures: aio-pika connection, channel, exchange and queue mocks
"""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from shared_intent.core.settings import RabbitSettings, clear_all_caches

# Ensure tests run without external infrastructure
os.environ.setdefault("RABBIT_HOST", "localhost")
os.environ.setdefault("RABBIT_CONFIG_DIR", "/nonexistent")
os.environ.setdefault("LOGGING_CONFIG_DIR", "/nonexistent")
os.environ.setdefault("LOG_FILE_ENABLED", "false")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Reload settings from the environment for every test."""
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def rabbit_settings() -> RabbitSettings:
    """RabbitSettings with fast timeouts for tests."""
    return RabbitSettings(
        host="rabbit.test",
        connection_timeout=1.0,
        retry_backoff=0.01,
        graceful_timeout=0.5,
    )


# ============================================================================
# Envelope Fixtures
# ============================================================================


@pytest.fixture
def routing() -> dict[str, Any]:
    """A complete routing block."""
    return {"conversation": {"id": "c-1"}, "user": {"id": "u-1"}}


@pytest.fixture
def envelope(routing) -> dict[str, Any]:
    """A valid inbound envelope."""
    return {
        "intents": "chime.testing",
        "data_types": "chime.string",
        "data": "hello",
        "routing": routing,
    }


@pytest.fixture
def response() -> dict[str, Any]:
    """A valid handler response without routing."""
    return {"intents": "chime.ActionIntent", "data_types": "chime.string", "data": "hi"}


# ============================================================================
# Broker Fixtures
# ============================================================================


@pytest.fixture
def mock_queue():
    """aio-pika queue mock."""
    queue = AsyncMock()
    queue.name = "EchoServiceQueue"
    queue.consume = AsyncMock(return_value="ctag-1")
    return queue


@pytest.fixture
def mock_exchange():
    """aio-pika exchange mock."""
    exchange = AsyncMock()
    exchange.name = "router_exchange"
    return exchange


@pytest.fixture
def mock_channel(mock_queue, mock_exchange):
    """aio-pika channel mock declaring the queue and exchange mocks."""
    channel = AsyncMock()
    channel.declare_exchange = AsyncMock(return_value=mock_exchange)
    channel.declare_queue = AsyncMock(return_value=mock_queue)
    return channel


@pytest.fixture
def mock_connection(mock_channel):
    """aio-pika robust connection mock."""
    connection = AsyncMock()
    connection.is_closed = False
    connection.channel = AsyncMock(return_value=mock_channel)
    return connection


@pytest.fixture
def mock_connections(mock_connection, rabbit_settings):
    """ConnectionManager stand-in returning the connection mock."""
    connections = MagicMock()
    connections.settings = rabbit_settings
    connections.get_connection = AsyncMock(return_value=mock_connection)
    connections.close = AsyncMock()
    return connections
