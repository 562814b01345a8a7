"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from storefrontctl.output.console import create_console, get_output, style_for_category

if TYPE_CHECKING:
    from rich.console import Console

    from storefrontctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "theme_css":
        return str(result.data.get("css", ""))
    if result.op == "publish" and result.data.get("public_url"):
        return str(result.data["public_url"])

    # For table/list results, return IDs only
    items = result.data.get("items") or result.data.get("modules")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("id", "type", "productId", "itemId"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="sf.ok")
    op = Text(f"  {result.op}", style="sf.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="sf.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="sf.id")
    elif key.endswith("_url"):
        v = Text(str(value), style="sf.url")
    elif key in ("title", "name"):
        v = Text(str(value), style="sf.title")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_warnings_inline(console: Console, result: ServiceResult) -> None:
    # Warnings go to stderr via AppContext.emit; verbose mode repeats them here
    for warning in result.warnings:
        console.print(Text(f"  warning: {warning}", style="sf.warning"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="sf.error")
    op = Text(f"  {result.op}", style="sf.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if err and err.detail.get("issues"):
        for issue in err.detail["issues"]:
            console.print(f"  - {issue}", markup=False)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k != "issues":
                console.print(f"    {k}: {v}", markup=False)


# ── Module renderers ──────────────────────────────────────────────────


def _module_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="sf.id", no_wrap=True)
    table.add_column("Type")
    table.add_column("Title", style="sf.title")
    table.add_column("Visible")
    for item in items:
        enabled = bool(item.get("enabled", True))
        table.add_row(
            str(item.get("order", "")),
            str(item.get("id", "")),
            str(item.get("type", "")),
            Text(str(item.get("title", "")), style="" if enabled else "sf.disabled"),
            "yes" if enabled else "no",
        )
    return table


def _render_module_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No modules. Add one with `storefrontctl modules add <type>`.")
        return
    console.print(_module_table(items))
    console.print(f"\n{result.data.get('count', len(items))} modules")


def _render_templates(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Type", style="sf.id", no_wrap=True)
    table.add_column("Name", style="sf.title")
    table.add_column("Category")
    if verbose:
        table.add_column("Description", style="dim")
    for item in items:
        category = str(item.get("category", ""))
        name = Text(str(item.get("name", "")))
        if item.get("premium"):
            name.append(" ★", style="sf.premium")
        row: list[Any] = [
            str(item.get("type", "")),
            name,
            Text(category, style=style_for_category(category)),
        ]
        if verbose:
            row.append(str(item.get("description", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} module types")


def _render_module_mutation(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render add/remove/move/toggle/update results."""
    _status_line(console, result)
    for key in ("id", "type", "title", "order", "enabled", "moved", "remaining", "description"):
        if key in result.data:
            _field(console, key, result.data[key])
    if "settings" in result.data:
        _field(console, "settings", result.data["settings"])
    if verbose:
        _field(console, "edit_counter", result.data.get("edit_counter"))
        _render_meta(console, result)


# ── Theme renderers ───────────────────────────────────────────────────


def _render_theme_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="sf.id", no_wrap=True)
    table.add_column("Name", style="sf.title")
    table.add_column("Category")
    for item in items:
        name = Text(str(item.get("name", "")))
        if item.get("premium"):
            name.append(" ★", style="sf.premium")
        table.add_row(
            "●" if item.get("current") else "",
            str(item.get("id", "")),
            name,
            str(item.get("category", "")),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} themes")


def _render_theme_css(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(str(result.data.get("css", "")), markup=False, highlight=False, soft_wrap=True)


# ── Preview renderer ──────────────────────────────────────────────────


def _render_preview(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    header = f"store {d.get('store_id')} · theme {d.get('theme_id')} · {d.get('device')}"
    if not d.get("live"):
        off = Panel("Live preview is off.", title=header, border_style="dim", expand=False)
        console.print(off)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="sf.id", no_wrap=True)
    table.add_column("Title", style="sf.title")
    table.add_column("Region")
    table.add_column("Columns", justify="right")
    table.add_column("Products", justify="right")
    for module in d.get("modules", []):
        columns = module.get("columns")
        products = module.get("products") or []
        table.add_row(
            "▶" if module.get("selected") else "",
            str(module.get("order", "")),
            str(module.get("id", "")),
            str(module.get("title", "")),
            str(module.get("region", "")),
            "" if columns is None else str(columns),
            str(len(products)) if module.get("type") == "featured-products" else "",
        )
    console.print(Panel(table, title=header, border_style="sf.op", expand=False))

    if verbose:
        for name, value in d.get("tokens", {}).items():
            console.print(f"  {name}: {value}", markup=False)


# ── Publish lifecycle renderers ───────────────────────────────────────


def _render_publish(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("store_id", "slug", "public_url", "published_at", "publish_version"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if verbose:
        _render_meta(console, result)


def _render_status(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    published = bool(d.get("is_published"))
    state = Text("published", style="sf.ok") if published else Text(str(d.get("status", "draft")))
    console.print(Text.assemble(Text(f"Store {d.get('store_id')}: ", style="sf.title"), state))
    for key in ("slug", "public_url", "published_at", "last_modified"):
        if d.get(key):
            _field(console, key, d[key])
    if "local_dirty" in d:
        _field(console, "unsaved_changes", "yes" if d["local_dirty"] else "no")


def _render_load(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("store_id", "source", "theme_id", "modules", "is_published", "draft_path"):
        if key in result.data:
            _field(console, key, result.data[key])
    enriched = result.data.get("enriched") or []
    _field(console, "enriched", len(enriched))
    if verbose:
        _render_warnings_inline(console, result)
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Modules
    "list_modules": _render_module_list,
    "list_templates": _render_templates,
    "add_module": _render_module_mutation,
    "remove_module": _render_module_mutation,
    "move_module": _render_module_mutation,
    "toggle_module": _render_module_mutation,
    "update_settings": _render_module_mutation,
    "update_details": _render_module_mutation,
    # Themes
    "list_themes": _render_theme_list,
    "select_theme": _render_generic,
    "theme_css": _render_theme_css,
    # Preview
    "preview": _render_preview,
    # Lifecycle
    "load": _render_load,
    "refresh": _render_load,
    "save": _render_generic,
    "publish": _render_publish,
    "unpublish": _render_generic,
    "status": _render_status,
    "discard": _render_generic,
}
