"""Command group: edit the storefront's module list (local draft only)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from storefrontctl.commands._base import StorefrontGroup
from storefrontctl.domain.types import Direction
from storefrontctl.services.customize import CustomizeService

if TYPE_CHECKING:
    from storefrontctl.commands._context import AppContext
    from storefrontctl.services.result import ServiceResult


def parse_assignments(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``key=value`` arguments into a settings patch.

    Values are read as JSON when they parse (numbers, booleans, lists,
    objects, quoted strings); anything else is taken as a plain string.
    """
    patch: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="SETTINGS")
        try:
            value = json.loads(raw)
        except ValueError:
            value = raw
        patch[key.strip()] = value
    return patch


def _apply(app: AppContext, op: str, edit: Any) -> None:
    """Load the draft, run *edit* on a CustomizeService, persist, and emit."""
    session = app.load_session(op)
    result: ServiceResult = edit(CustomizeService(session))
    if result.ok:
        app.save_draft(session)
    app.emit(result)


_MODULES_EXAMPLES = """\
  storefrontctl --store 42 modules list
  storefrontctl --store 42 modules add testimonials
  storefrontctl --store 42 modules move testimonials-9 up
  storefrontctl --store 42 modules set hero-banner-1 title="Fresh eggs daily" overlayOpacity=0.6
  storefrontctl --store 42 modules toggle search-filter-4"""


@click.group(cls=StorefrontGroup, examples=_MODULES_EXAMPLES, needs_store=True)
@click.pass_obj
def modules(app: AppContext) -> None:
    """List, add, remove, reorder, and configure storefront modules."""


@modules.command(
    "list",
    examples="""\
  storefrontctl --store 42 modules list
  storefrontctl --store 42 modules list --available
  storefrontctl --json --store 42 modules list""",
)
@click.option("--available", is_flag=True, help="List the module types that can be added.")
@click.pass_obj
def list_cmd(app: AppContext, available: bool) -> None:
    """Show the draft's modules in display order."""
    session = app.load_session("list_modules")
    service = CustomizeService(session)
    app.emit(service.list_templates() if available else service.list_modules())


@modules.command(
    examples="""\
  storefrontctl --store 42 modules add testimonials
  storefrontctl --store 42 modules add newsletter-signup"""
)
@click.argument("module_type")
@click.pass_obj
def add(app: AppContext, module_type: str) -> None:
    """Append a module of MODULE_TYPE with its default settings."""
    _apply(app, "add_module", lambda svc: svc.add_module(module_type))


@modules.command(
    examples="""\
  storefrontctl --store 42 modules remove testimonials-9"""
)
@click.argument("module_id")
@click.pass_obj
def remove(app: AppContext, module_id: str) -> None:
    """Remove MODULE_ID; the remaining modules close the gap."""
    _apply(app, "remove_module", lambda svc: svc.remove_module(module_id))


@modules.command(
    examples="""\
  storefrontctl --store 42 modules move contact-form-7 up
  storefrontctl --store 42 modules move hero-banner-1 down"""
)
@click.argument("module_id")
@click.argument(
    "direction", type=click.Choice([d.value for d in Direction], case_sensitive=False)
)
@click.pass_obj
def move(app: AppContext, module_id: str, direction: str) -> None:
    """Swap MODULE_ID with its neighbour above or below."""
    _apply(app, "move_module", lambda svc: svc.move_module(module_id, direction.lower()))


@modules.command(
    examples="""\
  storefrontctl --store 42 modules toggle search-filter-4"""
)
@click.argument("module_id")
@click.pass_obj
def toggle(app: AppContext, module_id: str) -> None:
    """Show or hide MODULE_ID without removing it."""
    _apply(app, "toggle_module", lambda svc: svc.toggle_module(module_id))


@modules.command(
    "set",
    examples="""\
  storefrontctl --store 42 modules set hero-banner-1 title="Fresh eggs daily"
  storefrontctl --store 42 modules set store-introduction-2 --title "Our story"
  storefrontctl --store 42 modules set featured-products-6 maxProducts=8 productsPerRow=4
  storefrontctl --store 42 modules set policy-section-8 showContact=false""",
)
@click.argument("module_id")
@click.argument("settings", nargs=-1)
@click.option("--title", default=None, help="Change the module's display title.")
@click.option("--description", default=None, help="Change the module's description.")
@click.pass_obj
def set_cmd(
    app: AppContext,
    module_id: str,
    settings: tuple[str, ...],
    title: str | None,
    description: str | None,
) -> None:
    """Update MODULE_ID's settings from KEY=VALUE pairs.

    Keys may be camelCase (as stored) or snake_case. Store-managed keys
    such as business hours are refused with a warning.
    """
    if not settings and title is None and description is None:
        msg = "Nothing to change: give KEY=VALUE pairs, --title, or --description."
        raise click.UsageError(msg)
    patch = parse_assignments(settings)

    session = app.load_session("update_settings")
    service = CustomizeService(session)
    result = None
    if title is not None or description is not None:
        result = service.update_details(module_id, title=title, description=description)
    if patch and (result is None or result.ok):
        result = service.update_settings(module_id, patch)
    assert result is not None
    if result.ok:
        app.save_draft(session)
    app.emit(result)
