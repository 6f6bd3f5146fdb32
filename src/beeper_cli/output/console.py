"""Off-screen Rich console for the ``info``, ``config show`` and ``version`` reports.

Reports are drawn into a StringIO buffer and handed back as text, so
commands echo them exactly like json/text/markdown listings.  A buffer is
never a terminal, which keeps piped and captured output free of ANSI codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

REPORT_WIDTH = 100

BEEPER_THEME = Theme(
    {
        "beeper.ok": "bold green",
        "beeper.error": "bold red",
        "beeper.warning": "bold yellow",
        "beeper.heading": "bold cyan",
        "beeper.key": "dim",
        "beeper.value": "bold",
        "beeper.url": "underline blue",
        "beeper.hint": "italic yellow",
    }
)


def create_console(width: int = REPORT_WIDTH) -> Console:
    # soft_wrap keeps long paths and URLs on one line
    return Console(
        file=StringIO(),
        theme=BEEPER_THEME,
        highlight=False,
        soft_wrap=True,
        width=width,
    )


def console_text(console: Console) -> str:
    """Everything printed to a console made by :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console is not backed by a string buffer")
    return buffer.getvalue()
