"""Rich Console factory and theme for storefrontctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from storefrontctl.domain.types import ModuleCategory

STOREFRONT_THEME = Theme(
    {
        "sf.ok": "bold green",
        "sf.error": "bold red",
        "sf.warning": "bold yellow",
        "sf.op": "bold cyan",
        "sf.key": "dim",
        "sf.id": "bold blue",
        "sf.url": "underline cyan",
        "sf.title": "bold",
        "sf.disabled": "dim strike",
        "sf.premium": "magenta",
        "sf.category.content": "green",
        "sf.category.products": "blue",
        "sf.category.engagement": "yellow",
        "sf.category.information": "cyan",
    }
)

_CATEGORY_STYLES: dict[str, str] = {
    ModuleCategory.CONTENT: "sf.category.content",
    ModuleCategory.PRODUCTS: "sf.category.products",
    ModuleCategory.ENGAGEMENT: "sf.category.engagement",
    ModuleCategory.INFORMATION: "sf.category.information",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=STOREFRONT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_category(category: str) -> str:
    """Return the Rich style name for a module category."""
    return _CATEGORY_STYLES.get(category, "")
