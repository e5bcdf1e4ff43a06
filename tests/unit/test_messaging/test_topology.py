"""Unit tests for exchange and queue provisioning."""
from __future__ import annotations

from aio_pika import ExchangeType
import pytest

from shared_intent.core.settings import RabbitSettings
from shared_intent.infra.messaging.conventions import ServiceIdentity
from shared_intent.infra.messaging.topology import TopologyProvisioner


@pytest.fixture
def topology(mock_connections, rabbit_settings):
    return TopologyProvisioner(mock_connections, ServiceIdentity("EchoService"), rabbit_settings)


@pytest.mark.unit
class TestTopologyProvisioner:
    """Test suite for TopologyProvisioner."""

    async def test_channel_sets_prefetch(self, topology, mock_channel, mock_connection):
        """Test the channel is opened once with the configured prefetch."""
        assert await topology.get_channel() is mock_channel
        assert await topology.get_channel() is mock_channel

        mock_connection.channel.assert_awaited_once()
        mock_channel.set_qos.assert_awaited_once_with(prefetch_count=1)

    async def test_router_exchange(self, topology, mock_channel, mock_exchange):
        """Test the router exchange is a durable topic exchange declared once."""
        assert await topology.get_router_exchange() is mock_exchange
        await topology.get_router_exchange()

        mock_channel.declare_exchange.assert_awaited_once_with(
            "router_exchange", ExchangeType.TOPIC, durable=True, auto_delete=False
        )

    async def test_self_queue(self, topology, mock_channel, mock_queue, mock_exchange):
        """Test the service exchange and auto-delete queue are declared and bound."""
        assert await topology.get_self_queue() is mock_queue
        await topology.get_self_queue()

        mock_channel.declare_exchange.assert_awaited_once_with(
            "EchoServiceExchange", ExchangeType.TOPIC, durable=True, auto_delete=False
        )
        mock_channel.declare_queue.assert_awaited_once_with(
            "EchoServiceQueue", auto_delete=True, arguments=None
        )
        mock_queue.bind.assert_awaited_once_with(mock_exchange, routing_key="#")

    async def test_dead_letter_exchange(self, mock_connections, mock_channel):
        """Test the queue is declared with a dead-letter exchange when configured."""
        settings = RabbitSettings(host="rabbit.test", dead_letter_exchange="dlx")
        topology = TopologyProvisioner(mock_connections, ServiceIdentity("EchoService"), settings)

        await topology.get_self_queue()

        assert mock_channel.declare_queue.await_args.kwargs["arguments"] == {"x-dead-letter-exchange": "dlx"}

    async def test_settings_default_to_connection_settings(self, mock_connections, rabbit_settings):
        """Test settings fall back to the connection manager's."""
        topology = TopologyProvisioner(mock_connections, ServiceIdentity("EchoService"))

        assert topology.settings is rabbit_settings
