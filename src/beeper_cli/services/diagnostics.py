"""Diagnostics — the data behind ``beeper info``.

Collects CLI/runtime details, the effective configuration, token status,
API connectivity, and (optionally) read/search permission checks.  API
failures are captured into the report rather than raised.
"""

from __future__ import annotations

import platform
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from beeper_cli import __version__
from beeper_cli.domain.errors import APIError, ErrorCategory

if TYPE_CHECKING:
    from beeper_cli.config.settings import CliSettings
    from beeper_cli.infrastructure.client import BeeperClient

_ACCESS_LABELS: dict[ErrorCategory, str] = {
    ErrorCategory.AUTH: "Authentication required",
    ErrorCategory.PERMISSION: "Insufficient permissions",
    ErrorCategory.NETWORK: "Network error",
}


@dataclass(frozen=True)
class AccessCheck:
    name: str
    ok: bool
    detail: str = ""


@dataclass(frozen=True)
class InfoReport:
    version: str
    python_version: str
    platform: str
    config_path: str
    config_exists: bool
    api_url: str
    output_format: str
    token: str | None
    connected: bool
    desktop_version: str | None = None
    connection_error: str | None = None
    access_checks: list[AccessCheck] = field(default_factory=list)


def mask_token(token: str) -> str:
    """Show only the first and last four characters (``****`` when short)."""
    if len(token) < 12:
        return "****"
    return f"{token[:4]}...{token[-4:]}"


def access_label(exc: APIError) -> str:
    """Short failure label for a permission check."""
    return _ACCESS_LABELS.get(exc.category, exc.message)


def _check_access(name: str, call: Callable[[], object]) -> AccessCheck:
    try:
        call()
    except APIError as exc:
        return AccessCheck(name=name, ok=False, detail=access_label(exc))
    return AccessCheck(name=name, ok=True)


def collect_info(
    settings: CliSettings,
    client: BeeperClient,
    *,
    test_permissions: bool = False,
) -> InfoReport:
    """Build an :class:`InfoReport`. Never raises for API failures."""
    connected = True
    connection_error: str | None = None
    desktop_version: str | None = None
    try:
        desktop_version = client.ping().server_version
    except APIError as exc:
        connected = False
        connection_error = str(exc)

    access_checks: list[AccessCheck] = []
    if test_permissions:
        access_checks.append(_check_access("Read (list chats)", client.list_chats))
        access_checks.append(
            _check_access("Search messages", lambda: client.search_messages("test", 1))
        )

    config_path = settings.config_path
    return InfoReport(
        version=__version__,
        python_version=platform.python_version(),
        platform=f"{sys.platform}/{platform.machine()}",
        config_path=str(config_path) if config_path else "",
        config_exists=bool(config_path and config_path.is_file()),
        api_url=settings.config.api_url,
        output_format=settings.config.output_format,
        token=mask_token(settings.token) if settings.token else None,
        connected=connected,
        desktop_version=desktop_version,
        connection_error=connection_error,
        access_checks=access_checks,
    )
