"""Subcommand modules for storefrontctl.

Provides register_commands() which uses deferred imports to keep
``storefrontctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 8 standalone commands.
    """
    # --- Groups ---
    from storefrontctl.commands.modules import modules
    from storefrontctl.commands.theme import theme

    cli.add_command(modules)
    cli.add_command(theme)

    # --- Standalone commands ---
    from storefrontctl.commands.discard import discard
    from storefrontctl.commands.init_cmd import init_cmd
    from storefrontctl.commands.preview import preview
    from storefrontctl.commands.publish import publish, refresh, save, status, unpublish

    cli.add_command(init_cmd)
    cli.add_command(preview)
    cli.add_command(save)
    cli.add_command(publish)
    cli.add_command(unpublish)
    cli.add_command(refresh)
    cli.add_command(status)
    cli.add_command(discard)
