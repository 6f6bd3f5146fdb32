"""Command: print version and platform details."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperCommand

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.command(cls=BeeperCommand)
@click.pass_obj
def version(app: AppContext) -> None:
    """Print version information."""
    import platform
    import sys

    from beeper_cli import __version__
    from beeper_cli.config.store import default_config_path
    from beeper_cli.output.renderers import render_version

    app.emit(
        render_version(
            __version__,
            platform.python_version(),
            f"{sys.platform}/{platform.machine()}",
            str(app.settings.config_path or default_config_path()),
        )
    )
