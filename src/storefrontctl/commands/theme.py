"""Command group: browse themes, switch the draft's theme, export CSS."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from storefrontctl.commands._base import StorefrontGroup
from storefrontctl.domain.types import ThemeCategory
from storefrontctl.services.customize import CustomizeService

if TYPE_CHECKING:
    from storefrontctl.commands._context import AppContext


_THEME_EXAMPLES = """\
  storefrontctl --store 42 theme list
  storefrontctl --store 42 theme list --category rustic
  storefrontctl --store 42 theme select rustic-artisanal
  storefrontctl -q --store 42 theme css > theme.css"""


@click.group(cls=StorefrontGroup, examples=_THEME_EXAMPLES, needs_store=True)
@click.pass_obj
def theme(app: AppContext) -> None:
    """Browse and apply storefront themes."""


@theme.command(
    "list",
    examples="""\
  storefrontctl --store 42 theme list
  storefrontctl --store 42 theme list --category modern --free-only""",
)
@click.option(
    "--category",
    type=click.Choice([c.value for c in ThemeCategory], case_sensitive=False),
    default=None,
    help="Only themes in this family.",
)
@click.option("--free-only", is_flag=True, help="Hide premium themes.")
@click.pass_obj
def list_cmd(app: AppContext, category: str | None, free_only: bool) -> None:
    """List catalog themes; the draft's current theme is marked."""
    session = app.load_session("list_themes")
    app.emit(
        CustomizeService(session).list_themes(
            category=category.lower() if category else None,
            include_premium=not free_only,
        )
    )


@theme.command(
    examples="""\
  storefrontctl --store 42 theme select bold-vibrant"""
)
@click.argument("theme_id")
@click.pass_obj
def select(app: AppContext, theme_id: str) -> None:
    """Switch the draft to THEME_ID and regenerate its CSS."""
    session = app.load_session("select_theme")
    result = CustomizeService(session).select_theme(theme_id)
    if result.ok:
        app.save_draft(session)
    app.emit(result)


@theme.command(
    examples="""\
  storefrontctl --store 42 theme css
  storefrontctl -q --store 42 theme css minimalist-scandinavian > nordic.css"""
)
@click.argument("theme_id", required=False)
@click.pass_obj
def css(app: AppContext, theme_id: str | None) -> None:
    """Print the CSS variables for THEME_ID (default: the draft's theme)."""
    session = app.load_session("theme_css")
    app.emit(CustomizeService(session).theme_css(theme_id))
