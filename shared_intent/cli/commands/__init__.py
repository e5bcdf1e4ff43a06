"""CLI command modules."""

from shared_intent.cli.commands import broker, service

__all__ = [
    "broker",
    "service",
]
