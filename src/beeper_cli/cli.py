"""Root CLI group for beeper-cli with global flags and command registration."""

from __future__ import annotations

import click

from beeper_cli import __version__
from beeper_cli.commands import register_commands
from beeper_cli.commands._context import AppContext, fail
from beeper_cli.config.settings import CliSettings
from beeper_cli.domain.errors import APIError

_NO_UPDATE_CHECK = frozenset({"version"})


@click.group(
    invoke_without_command=True,
    epilog="Docs and issues: https://github.com/nerveband/beeper-api-cli",
)
@click.version_option(version=__version__, prog_name="beeper")
@click.option(
    "-o",
    "--output",
    default=None,
    metavar="FORMAT",
    help="Output format (json, text, markdown).",
)
@click.option(
    "-q", "--quiet", is_flag=True, help="Suppress hints and update notifications."
)
@click.option("--json-errors", is_flag=True, help="Write errors to stderr as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    output: str | None,
    quiet: bool,
    json_errors: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """beeper - command-line client for the Beeper Desktop API.

    Read chats, list and search messages, and send messages across every
    network Beeper connects to.  Results go to stdout as json (default),
    text or markdown.
    """
    # Callers embedding the CLI may seed obj with {"transport": httpx transport}.
    ctx.ensure_object(dict)
    transport = ctx.obj.get("transport")
    try:
        settings = CliSettings.from_cli(
            config_path=config_path,
            output=output,
            quiet=quiet,
            json_errors=json_errors,
            verbose=verbose,
            log_json=log_json,
        )
    except APIError as exc:
        fail(exc, json_errors=json_errors, quiet=quiet)

    app = AppContext(settings, transport=transport)
    ctx.obj = app
    ctx.call_on_close(app.close)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return
    if ctx.invoked_subcommand not in _NO_UPDATE_CHECK:
        app.start_update_check(__version__)


@cli.result_callback()
@click.pass_obj
def _after_command(app: AppContext, _result: object, **_params: object) -> None:
    app.show_update_notice()


register_commands(cli)
