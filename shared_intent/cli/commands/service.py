"""Service commands."""

from __future__ import annotations

import importlib
from typing import Any

import click

from shared_intent.cli.utils import error, info
from shared_intent.core.exceptions import IntentServiceError
from shared_intent.infra.messaging.conventions import ServiceIdentity
from shared_intent.intents.runtime import ServiceRuntime, run_service


def load_handler(target: str) -> Any:
    """Resolve ``module:attr`` to a handler instance.

    Classes are instantiated with no arguments; anything else is returned as is.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        msg = f"Expected MODULE:ATTR, got {target!r}"
        raise click.BadParameter(msg, param_hint="TARGET")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        msg = f"Cannot import {module_name!r}: {e}"
        raise click.BadParameter(msg, param_hint="TARGET") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            msg = f"{module_name!r} has no attribute {attr!r}"
            raise click.BadParameter(msg, param_hint="TARGET") from e

    return obj() if isinstance(obj, type) else obj


@click.command(name="run")
@click.argument("target")
@click.option(
    "--name",
    "service_name",
    default=None,
    help="Service name for exchange/queue naming (defaults to the handler class name)",
)
def run(target: str, service_name: str | None) -> None:
    """Run the intent service at TARGET (MODULE:ATTR) until interrupted."""
    handler = load_handler(target)
    identity = ServiceIdentity(service_name) if service_name else None

    try:
        runtime = ServiceRuntime(handler, getattr(handler, "routes", ()), identity=identity)
        runtime.dispatcher.ensure_handler()
    except IntentServiceError as e:
        error(str(e))
        raise click.Abort from e

    info(f"Starting {runtime.identity.name} on queue {runtime.identity.queue_name}")
    run_service(runtime)
