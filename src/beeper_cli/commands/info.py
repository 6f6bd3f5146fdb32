"""Command: diagnostics report for the CLI, config and API connectivity."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperCommand

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.command(
    cls=BeeperCommand,
    examples="""\
  beeper info
  beeper info --test-permissions""",
)
@click.option(
    "--test-permissions",
    is_flag=True,
    help="Also check read and search access with the current token.",
)
@click.pass_obj
def info(app: AppContext, test_permissions: bool) -> None:
    """Show version, configuration, authentication and API status."""
    from beeper_cli.output.renderers import render_info
    from beeper_cli.services.diagnostics import collect_info

    report = collect_info(app.settings, app.client, test_permissions=test_permissions)
    if report.desktop_version:
        app.desktop_version = report.desktop_version
    app.emit(render_info(report, quiet=app.settings.quiet))
