"""Click base classes adding an eager ``--examples`` flag.

``beeper <cmd> --examples`` prints canned invocations and exits, so
``--help`` can stay terse.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Installs ``--examples`` when the command is declared with ``examples=``."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def _print(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value:
                click.echo(f"Examples for '{ctx.command_path}':\n")
                click.echo(examples)
                ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_print,
                help="Show usage examples.",
            )
        )


class BeeperCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class BeeperGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`BeeperCommand` by default."""

    command_class = BeeperCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
