"""Click command and group classes that accept an ``examples=`` block.

``gigledger jobs pay --examples`` prints the block and exits, so ``--help``
stays short. The flag only exists on commands that were given examples.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag next to Click's own ``--help``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = (
            textwrap.indent(textwrap.dedent(examples).strip(), "  ") if examples else None
        )
        self._examples_option = (
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples and exit.",
            )
            if self.examples
            else None
        )

    def get_params(self, ctx: click.Context) -> list[click.Parameter]:
        params = super().get_params(ctx)  # type: ignore[misc]
        if self._examples_option is None:
            return params
        return [*params, self._examples_option]

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
        ctx.exit(0)


class GigCommand(_ExamplesMixin, click.Command):
    """A Click command with optional ``--examples``."""


class GigGroup(_ExamplesMixin, click.Group):
    """A Click group with optional ``--examples``; subcommands are GigCommands."""

    command_class = GigCommand
