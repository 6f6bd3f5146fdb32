"""Command: search messages across all chats."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperCommand

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.command(
    cls=BeeperCommand,
    examples="""\
  beeper search --query "dinner"
  beeper search --query "flight" --limit 5 -o text""",
)
@click.option("--query", default="", help="Search text.")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Maximum number of results.",
)
@click.pass_obj
def search(app: AppContext, query: str, limit: int) -> None:
    """Search messages across all chats."""
    from beeper_cli.output.formatters import format_messages

    items = app.call(app.client.search_messages, query, limit)
    app.emit(format_messages(items, app.output_format))
