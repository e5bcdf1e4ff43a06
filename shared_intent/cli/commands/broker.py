"""Broker connectivity commands."""

from __future__ import annotations

import sys

import click

from shared_intent.cli.utils import coro, error, info, success
from shared_intent.core.settings import get_rabbit_settings
from shared_intent.infra.messaging.connection import ConnectionManager


@click.command(name="check")
@click.option(
    "--attempts",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Connection attempts before giving up (still bounded by RABBIT_CONNECTION_TIMEOUT)",
)
@coro
async def check(attempts: int) -> None:
    """Open and close one RabbitMQ connection using the current settings."""
    settings = get_rabbit_settings()
    info(f"Connecting to {settings.host}:{settings.port} (vhost {settings.vhost})...")

    connections = ConnectionManager(settings, max_attempts=attempts)
    try:
        await connections.get_connection()
    except Exception as e:
        error(f"RabbitMQ connection failed: {e}")
        sys.exit(1)
    finally:
        await connections.close()

    success("RabbitMQ connection OK")
