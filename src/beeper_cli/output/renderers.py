"""Rich renderers for status reports (``info``, ``config show``, ``version``).

Each renderer writes to a StringIO-backed Console and returns the text.
Listings and errors are not rendered here; see
:mod:`beeper_cli.output.formatters`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from beeper_cli.output.console import console_text, create_console

if TYPE_CHECKING:
    from rich.console import Console

    from beeper_cli.config.settings import EffectiveConfig
    from beeper_cli.services.diagnostics import InfoReport

_LABEL_WIDTH = 16


# ── Helpers ───────────────────────────────────────────────────────────


def _heading(console: Console, title: str) -> None:
    console.print(Text(title, style="beeper.heading"))
    console.print(Text("-" * len(title), style="beeper.heading"))


def _field(console: Console, label: str, value: object, *, style: str = "") -> None:
    key = Text(f"{label + ':':<{_LABEL_WIDTH}}", style="beeper.key")
    console.print(key, Text(str(value), style=style), sep="")


def _note(console: Console, text: str) -> None:
    console.print(Text(" " * _LABEL_WIDTH + text, style="beeper.key"))


# ── Public API ────────────────────────────────────────────────────────


def render_info(report: InfoReport, *, quiet: bool = False) -> str:
    """Render the ``beeper info`` report."""
    console = create_console()

    title = "Beeper API CLI Information"
    console.print(Text(title, style="bold"))
    console.print("=" * len(title))
    console.print()
    _field(console, "Version", report.version, style="beeper.value")
    _field(console, "Python Version", report.python_version)
    _field(console, "Platform", report.platform)
    console.print()

    _heading(console, "Configuration")
    _field(console, "Config File", report.config_path)
    if not report.config_exists:
        _note(console, "(not created yet, using defaults)")
    _field(console, "API URL", report.api_url, style="beeper.url")
    _field(console, "Output Format", report.output_format)
    console.print()

    _heading(console, "Authentication")
    if report.token:
        _field(console, "BEEPER_TOKEN", f"Set ({report.token})", style="beeper.ok")
    else:
        _field(console, "BEEPER_TOKEN", "Not set", style="beeper.warning")
        _note(console, "(Set this environment variable to authenticate API requests)")
    console.print()

    _heading(console, "API Connectivity")
    if report.connected:
        _field(console, "Status", "Connected", style="beeper.ok")
        if report.desktop_version:
            _field(console, "Desktop Ver", report.desktop_version)
    else:
        _field(console, "Status", "Unreachable", style="beeper.error")
        _field(console, "Error", report.connection_error or "")
        if not quiet:
            console.print()
            console.print(
                Text(
                    "Hint: Make sure Beeper Desktop is running and the API is enabled.\n"
                    "      Try 'beeper discover' to find the API endpoint.",
                    style="beeper.hint",
                )
            )

    if report.access_checks:
        console.print()
        _heading(console, "Permission Test")
        for check in report.access_checks:
            status = Text("OK", style="beeper.ok") if check.ok else Text(
                f"FAILED - {check.detail}", style="beeper.error"
            )
            console.print(Text(f"{check.name + ':':<20}"), status, sep="")
        console.print()
        console.print("Note: Write permissions cannot be tested without making actual changes.")

    return console_text(console)


def render_config(config_path: str, config: EffectiveConfig) -> str:
    """Render ``beeper config show``."""
    console = create_console()
    _field(console, "Config File", config_path)
    _field(console, "API URL", config.api_url, style="beeper.url")
    _field(console, "Output Format", config.output_format)
    return console_text(console)


def render_version(version: str, python_version: str, platform: str, config_path: str) -> str:
    """Render ``beeper version``."""
    console = create_console()
    console.print(Text(f"beeper-cli version {version}", style="bold"))
    console.print(f"  Python version: {python_version}")
    console.print(f"  OS/Arch:        {platform}")
    console.print(f"  Config:         {config_path}")
    return console_text(console)
