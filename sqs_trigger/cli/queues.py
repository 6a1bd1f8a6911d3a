"""
SQS Trigger Queues CLI - Discover queues to poll.

Usage:
  sqs-trigger queues
  sqs-trigger queues --prefix orders
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from sqs_trigger.cli import common

console = Console()


@click.command()
@click.option('--prefix', help='Only list queues whose name starts with this prefix')
@click.option('--region', help='AWS region (default: from SQS_TRIGGER_REGION env or us-east-1)')
def queues(prefix, region):
    """List SQS queues (name and URL)."""
    sqs = common.get_sqs_client(region)

    try:
        descriptors = sqs.list_queues(prefix=prefix)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not descriptors:
        console.print("[dim]No queues found[/dim]")
        return

    table = Table(title=f"SQS Queues ({common.resolve_region(region)})")
    table.add_column("Name", style="cyan")
    table.add_column("URL", style="green")

    for queue in descriptors:
        table.add_row(queue.name, queue.url)

    console.print(table)
