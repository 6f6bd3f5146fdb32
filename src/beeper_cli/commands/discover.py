"""Command: find a running Beeper Desktop API on localhost."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperCommand

if TYPE_CHECKING:
    from beeper_cli.commands._context import AppContext


@click.command(
    cls=BeeperCommand,
    examples="""\
  beeper discover
  beeper discover --save""",
)
@click.option("--save", is_flag=True, help="Store the discovered URL as api_url.")
@click.pass_obj
def discover(app: AppContext, save: bool) -> None:
    """Try the default Beeper Desktop ports and print the API URL."""
    from beeper_cli.config.settings import ConfigLayer
    from beeper_cli.config.store import default_config_path, save_config_file
    from beeper_cli.domain.errors import APIError
    from beeper_cli.infrastructure.client import discover_api

    try:
        url = discover_api(transport=app.transport)
        if save:
            save_config_file(
                app.settings.config_path or default_config_path(),
                ConfigLayer(api_url=url),
            )
    except APIError as exc:
        app.fail(exc)
    app.emit(f"{url}\n")
