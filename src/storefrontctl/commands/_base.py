"""Custom Click base classes with --examples and store-selection support.

``StorefrontCommand`` and ``StorefrontGroup`` accept an ``examples``
parameter; ``--examples`` prints them and exits, which keeps ``--help``
short. Commands built with ``needs_store=True`` refuse to run until a
store has been selected with ``--store`` or ``STOREFRONTCTL_STORE_ID``.
"""

from __future__ import annotations

from typing import Any

import click

NO_STORE_MESSAGE = "No store selected. Pass --store ID or set STOREFRONTCTL_STORE_ID."


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class StorefrontCommand(click.Command):
    """Click Command with ``--examples`` and an optional store requirement."""

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        needs_store: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.needs_store = needs_store
        if examples:
            _add_examples_option(self, examples)

    def invoke(self, ctx: click.Context) -> Any:
        if self.needs_store:
            settings = getattr(ctx.obj, "settings", None)
            if settings is None or settings.store_id is None:
                raise click.UsageError(NO_STORE_MESSAGE, ctx=ctx)
        return super().invoke(ctx)


class StorefrontGroup(click.Group):
    """Click Group whose subcommands are StorefrontCommands.

    ``needs_store`` given to the group is inherited by every subcommand
    declared through it.
    """

    command_class = StorefrontCommand

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        needs_store: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.needs_store = needs_store
        if examples:
            _add_examples_option(self, examples)

    def command(self, *args: Any, **kwargs: Any) -> Any:
        if self.needs_store:
            kwargs.setdefault("needs_store", True)
        return super().command(*args, **kwargs)
