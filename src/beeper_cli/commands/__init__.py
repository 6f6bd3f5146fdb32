"""Subcommand modules for beeper-cli.

Provides register_commands() which uses deferred imports to keep
``beeper --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 5 standalone commands.
    """
    # --- Groups ---
    from beeper_cli.commands.chats import chats
    from beeper_cli.commands.config_cmd import config_cmd
    from beeper_cli.commands.messages import messages

    cli.add_command(chats)
    cli.add_command(messages)
    cli.add_command(config_cmd)

    # --- Standalone commands ---
    from beeper_cli.commands.discover import discover
    from beeper_cli.commands.info import info
    from beeper_cli.commands.search import search
    from beeper_cli.commands.send import send
    from beeper_cli.commands.version import version

    cli.add_command(send)
    cli.add_command(search)
    cli.add_command(info)
    cli.add_command(discover)
    cli.add_command(version)
