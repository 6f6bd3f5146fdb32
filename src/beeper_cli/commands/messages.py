"""Command group: read messages from a chat."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperGroup

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.group(
    cls=BeeperGroup,
    examples="""\
  beeper messages list '!abc123:beeper.local'
  beeper messages list '!abc123:beeper.local' --limit 5 -o text""",
)
def messages() -> None:
    """Read messages."""


@messages.command(
    "list",
    examples="""\
  beeper messages list '!abc123:beeper.local'
  beeper messages list '!abc123:beeper.local' --limit 50 -o markdown""",
)
@click.argument("chat_id")
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Maximum number of messages.",
)
@click.pass_obj
def list_messages(app: AppContext, chat_id: str, limit: int) -> None:
    """List recent messages in a chat."""
    from beeper_cli.output.formatters import format_messages

    items = app.call(app.client.list_messages, chat_id, limit)
    app.emit(format_messages(items, app.output_format))
