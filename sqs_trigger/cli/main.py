#!/usr/bin/env python3
"""
SQS Trigger CLI - Main entry point.

Commands:
  sqs-trigger run       - Poll a queue and print received messages
  sqs-trigger queues    - List queues available to the current credentials
"""

import sys

import click
from rich.console import Console

from sqs_trigger import __version__
from sqs_trigger.logging_setup import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """SQS Trigger - Poll an AWS SQS queue on a fixed cadence."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    # JSON lines on stdout for every subcommand: root=WARNING, sqs_trigger namespace=INFO
    setup_logging(verbose)


# Import subcommands
from sqs_trigger.cli.run import run
from sqs_trigger.cli.queues import queues

cli.add_command(run)
cli.add_command(queues)


def main():
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if '--verbose' in sys.argv or '-v' in sys.argv:
            raise
        sys.exit(1)


if __name__ == '__main__':
    main()
