"""Unit tests for topology naming conventions."""
from __future__ import annotations

import pytest

from shared_intent.infra.messaging.conventions import ServiceIdentity, get_exchange_name, get_queue_name


class TestSharedIntents:
    __test__ = False

    def handle_message(self, delivery, metadata, envelope):
        return None


@pytest.mark.unit
class TestConventions:
    """Test suite for naming helpers."""

    def test_names(self):
        """Test exchange and queue suffixes."""
        assert get_exchange_name("EchoService") == "EchoServiceExchange"
        assert get_queue_name("EchoService") == "EchoServiceQueue"

    def test_identity_from_instance_and_class(self):
        """Test the identity uses the class name."""
        assert ServiceIdentity.of(TestSharedIntents()).name == "TestSharedIntents"
        assert ServiceIdentity.of(TestSharedIntents).exchange_name == "TestSharedIntentsExchange"

    def test_empty_name_rejected(self):
        """Test an identity needs a name."""
        with pytest.raises(ValueError, match="must not be empty"):
            ServiceIdentity("")
