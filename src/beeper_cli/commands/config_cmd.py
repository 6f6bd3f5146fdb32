"""Command group: view and modify the persisted configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from beeper_cli.commands._base import BeeperGroup

if TYPE_CHECKING:
    from pathlib import Path

    from beeper_cli.commands._context import AppContext
    from beeper_cli.config.settings import ConfigLayer


@click.group(
    "config",
    cls=BeeperGroup,
    examples="""\
  beeper config show
  beeper config set-url http://localhost:39868
  beeper config set-format text""",
)
def config_cmd() -> None:
    """View and modify configuration.

    \b
    Settings live in ~/.beeper-api-cli/config.yaml (or the file named by
    --config / BEEPER_CONFIG) with two keys, api_url and output_format.
    BEEPER_API_URL and BEEPER_OUTPUT_FORMAT override the file;
    BEEPER_TOKEN supplies the API token.
    """


def _config_path(app: AppContext) -> Path:
    from beeper_cli.config.store import default_config_path

    return app.settings.config_path or default_config_path()


def _save(app: AppContext, update: ConfigLayer) -> ConfigLayer:
    from beeper_cli.config.store import save_config_file
    from beeper_cli.domain.errors import APIError

    try:
        return save_config_file(_config_path(app), update)
    except APIError as exc:
        app.fail(exc)


@config_cmd.command(
    "show",
    examples="""\
  beeper config show
  BEEPER_OUTPUT_FORMAT=text beeper config show""",
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Display the effective configuration."""
    from beeper_cli.output.renderers import render_config

    app.emit(render_config(str(_config_path(app)), app.settings.config))


@config_cmd.command(
    "set-url",
    examples="""\
  beeper config set-url http://localhost:39867""",
)
@click.argument("url")
@click.pass_obj
def set_url(app: AppContext, url: str) -> None:
    """Set the Beeper Desktop API URL."""
    from beeper_cli.config.settings import ConfigLayer
    from beeper_cli.domain.errors import config_error

    url = url.strip()
    if not url:
        app.fail(config_error("api_url cannot be empty"))
    saved = _save(app, ConfigLayer(api_url=url))
    app.emit(f"API URL set to: {saved.api_url}\n")


@config_cmd.command(
    "set-format",
    examples="""\
  beeper config set-format markdown""",
)
@click.argument("fmt", metavar="FORMAT")
@click.pass_obj
def set_format(app: AppContext, fmt: str) -> None:
    """Set the default output format (json, text, markdown)."""
    from beeper_cli.config.settings import ConfigLayer, EffectiveConfig, validate_config
    from beeper_cli.domain.errors import APIError

    try:
        validate_config(EffectiveConfig(output_format=fmt))
    except APIError as exc:
        app.fail(exc)
    saved = _save(app, ConfigLayer(output_format=fmt))
    app.emit(f"Output format set to: {saved.output_format}\n")
