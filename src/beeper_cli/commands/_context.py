"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``.  Provides the lazily-built API client, centralized
output (stdout for results, stderr for errors and notices), exit codes,
and the background update check.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, NoReturn, TypeVar

import click

from beeper_cli.domain.errors import APIError, exit_code_for, record_from_exception
from beeper_cli.output.formatters import format_error

if TYPE_CHECKING:
    from concurrent.futures import Future

    import httpx

    from beeper_cli.config.settings import CliSettings
    from beeper_cli.infrastructure.client import APIResponse, BeeperClient
    from beeper_cli.services.update import UpdateInfo

T = TypeVar("T")


def fail(exc: BaseException, *, json_errors: bool = False, quiet: bool = False) -> NoReturn:
    """Print *exc* to stderr and exit with its mapped code (1 or 2)."""
    record = record_from_exception(exc)
    click.echo(format_error(record, as_json=json_errors, quiet=quiet), err=True, nl=False)
    raise SystemExit(exit_code_for(exc))


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The client is built on first use so ``--help``, ``--version`` and the
    ``config`` commands never validate the API configuration.

    *transport* is handed to every HTTP client this context builds.
    """

    def __init__(
        self, settings: CliSettings, transport: httpx.BaseTransport | None = None
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.desktop_version: str | None = None
        self._client: BeeperClient | None = None
        self._update_future: Future[UpdateInfo] | None = None

        from beeper_cli.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_format(self) -> str:
        """The validated output format."""
        from beeper_cli.config.settings import validate_config

        try:
            return validate_config(self.settings.config).output_format
        except APIError as exc:
            self.fail(exc)

    @property
    def client(self) -> BeeperClient:
        """The API client (validated and created lazily on first access)."""
        if self._client is None:
            from beeper_cli.config.settings import validate_config
            from beeper_cli.infrastructure.client import BeeperClient

            try:
                config = validate_config(self.settings.config)
            except APIError as exc:
                self.fail(exc)
            self._client = BeeperClient(
                config,
                self.settings.token or None,
                quiet=self.settings.quiet,
                transport=self.transport,
            )
        return self._client

    def call(self, operation: Callable[..., APIResponse[T]], *args: object) -> T:
        """Run a client operation; on failure render the error and exit."""
        try:
            response = operation(*args)
        except APIError as exc:
            self.fail(exc)
        if response.server_version:
            self.desktop_version = response.server_version
        return response.payload

    def emit(self, text: str) -> None:
        """Write a rendered result to stdout."""
        click.echo(text, nl=False)

    def fail(self, exc: BaseException) -> NoReturn:
        fail(exc, json_errors=self.settings.json_errors, quiet=self.settings.quiet)

    # ------------------------------------------------------------------
    # Update notice
    # ------------------------------------------------------------------

    def start_update_check(self, current_version: str) -> None:
        """Kick off the background check unless disabled or quiet."""
        cache_path = self.settings.cache_path
        if self.settings.quiet or not self.settings.check_updates or cache_path is None:
            return
        from beeper_cli.services.update import UpdateChecker

        self._update_future = UpdateChecker(cache_path).check_async(current_version)

    def show_update_notice(self) -> None:
        """Print the notice if the check already finished. Never waits."""
        if self.settings.quiet:
            return
        from beeper_cli.services.update import poll_notice

        notice = poll_notice(self._update_future)
        if notice:
            click.echo(notice, err=True, nl=False)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
