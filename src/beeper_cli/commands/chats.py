"""Command group: list and inspect chats."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperGroup

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.group(
    cls=BeeperGroup,
    examples="""\
  beeper chats list
  beeper chats list -o text
  beeper chats get '!abc123:beeper.local' -o markdown""",
)
def chats() -> None:
    """List and inspect chats."""


@chats.command(
    "list",
    examples="""\
  beeper chats list
  beeper chats list -o markdown""",
)
@click.pass_obj
def list_chats(app: AppContext) -> None:
    """List all chats."""
    from beeper_cli.output.formatters import format_chats

    items = app.call(app.client.list_chats)
    app.emit(format_chats(items, app.output_format))


@chats.command(
    "get",
    examples="""\
  beeper chats get '!abc123:beeper.local'
  beeper chats get '!abc123:beeper.local' -o text""",
)
@click.argument("chat_id")
@click.pass_obj
def get_chat(app: AppContext, chat_id: str) -> None:
    """Show one chat by ID."""
    from beeper_cli.output.formatters import format_chats

    chat = app.call(app.client.get_chat, chat_id)
    app.emit(format_chats([chat], app.output_format))
