"""Main CLI entry point for shared-intent."""

import click

from shared_intent import __version__
from shared_intent.cli.commands import broker, service
from shared_intent.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="shared-intent")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """shared-intent - Run and operate RabbitMQ intent services.

    \b
    Quick Start:
      shared-intent check                                        # Test broker connectivity
      shared-intent run shared_intent.examples.echo:EchoService  # Run a service
    """
    ctx.ensure_object(dict)


cli.add_command(service.run)
cli.add_command(broker.check)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
