"""Command: render plan for the local draft."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from storefrontctl.commands._base import StorefrontCommand
from storefrontctl.domain.types import DeviceMode, ModuleType
from storefrontctl.services.customize import CustomizeService

if TYPE_CHECKING:
    from storefrontctl.commands._context import AppContext

_PREVIEW_EXAMPLES = """\
  storefrontctl --store 42 preview
  storefrontctl --store 42 preview --device mobile
  storefrontctl --store 42 preview --select featured-products-6 --inventory
  storefrontctl --json --store 42 preview --no-live"""


@click.command("preview", cls=StorefrontCommand, examples=_PREVIEW_EXAMPLES, needs_store=True)
@click.option(
    "--device",
    type=click.Choice([d.value for d in DeviceMode], case_sensitive=False),
    default=None,
    help="Viewport to lay out for (default from [preview] device).",
)
@click.option(
    "--live/--no-live",
    default=None,
    help="Live preview; off yields an idle plan (default from [preview] live).",
)
@click.option("--select", "selected", default=None, help="Highlight this module id.")
@click.option(
    "--inventory/--no-inventory",
    default=False,
    help="Fetch active inventory so featured products show real items.",
)
@click.pass_obj
def preview(
    app: AppContext,
    device: str | None,
    live: bool | None,
    selected: str | None,
    inventory: bool,
) -> None:
    """Show which modules render where, with per-device column counts."""
    session = app.load_session("preview")
    options = app.settings.preview

    items: list[dict[str, Any]] = []
    wants_products = any(
        m.type == ModuleType.FEATURED_PRODUCTS for m in session.document.modules.enabled()
    )
    if inventory and wants_products:
        fetched = app.run(lambda gw: app.workflow(gw).inventory(session.store_id))
        if fetched.ok:
            items = fetched.data.get("items", [])
        else:
            message = fetched.error.message if fetched.error else "unknown error"
            click.echo(f"WARNING: inventory unavailable ({message})", err=True)

    result = CustomizeService(session).preview(
        device=(device or options.device).lower(),
        live=options.live if live is None else live,
        selected=selected,
        inventory=items,
    )
    app.emit(result)
