"""Command: send a message to a chat."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperCommand

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.command(
    cls=BeeperCommand,
    examples="""\
  beeper send --chat-id '!abc123:beeper.local' --message "On my way"
  beeper send --chat-id '!abc123:beeper.local' --message "Done" -o text""",
)
@click.option("--chat-id", default="", help="Destination chat ID.")
@click.option("--message", "text", default="", help="Message text.")
@click.pass_obj
def send(app: AppContext, chat_id: str, text: str) -> None:
    """Send a message.

    Both --chat-id and --message are required; missing values fail
    validation before anything is sent.
    """
    from beeper_cli.output.formatters import UnsupportedFormatError, format_send_result

    result = app.call(app.client.send_message, chat_id, text)
    try:
        app.emit(format_send_result(result, app.output_format))
    except UnsupportedFormatError as exc:
        app.fail(exc)
