"""Theme models and the immutable ThemeCatalog.

The built-in themes ship as package data (``data/themes.yaml``) and are
parsed once per catalog construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from importlib.resources import files

from pydantic import BaseModel, Field
from ruamel.yaml import YAML

from storefrontctl.domain.types import ThemeCategory

DEFAULT_THEME_ID = "clean-modern"


class TextColors(BaseModel):
    model_config = {"frozen": True}

    primary: str
    secondary: str
    muted: str


class ThemeColors(BaseModel):
    model_config = {"frozen": True}

    primary: str
    secondary: str
    accent: str
    background: str
    surface: str
    text: TextColors
    border: str
    shadow: str


class FontFamily(BaseModel):
    model_config = {"frozen": True}

    primary: str
    secondary: str | None = None


class LineHeight(BaseModel):
    model_config = {"frozen": True}

    tight: float
    normal: float
    relaxed: float


class Typography(BaseModel):
    model_config = {"frozen": True}

    font_family: FontFamily
    font_size: dict[str, str]
    font_weight: dict[str, int]
    line_height: LineHeight


class Layout(BaseModel):
    model_config = {"frozen": True}

    max_width: str
    container_padding: str
    border_radius: dict[str, str]
    breakpoints: dict[str, str] = Field(default_factory=dict)


class Transition(BaseModel):
    model_config = {"frozen": True}

    fast: str
    normal: str
    slow: str


class Effects(BaseModel):
    model_config = {"frozen": True}

    box_shadow: dict[str, str]
    blur: dict[str, str] = Field(default_factory=dict)
    transition: Transition


class Theme(BaseModel):
    """A complete visual theme: palette, type scale, spacing, layout, effects."""

    model_config = {"frozen": True}

    id: str
    name: str
    description: str
    category: ThemeCategory
    colors: ThemeColors
    typography: Typography
    spacing: dict[str, str]
    layout: Layout
    effects: Effects
    custom_properties: dict[str, str] = Field(default_factory=dict)
    recommended_for: list[str] = Field(default_factory=list)
    inspiration: str | None = None
    premium: bool = False


def load_builtin_themes() -> list[Theme]:
    """Parse the packaged theme data."""
    resource = files("storefrontctl") / "data" / "themes.yaml"
    data = YAML(typ="safe").load(resource.read_text(encoding="utf-8"))
    return [Theme.model_validate(entry) for entry in data["themes"]]


class ThemeCatalog:
    """Lookup of themes keyed by id, preserving catalog order."""

    def __init__(self, themes: Iterable[Theme], *, default_id: str = DEFAULT_THEME_ID) -> None:
        self._themes: dict[str, Theme] = {t.id: t for t in themes}
        if default_id not in self._themes:
            msg = f"Default theme {default_id!r} is not in the catalog"
            raise KeyError(msg)
        self._default_id = default_id

    @classmethod
    def builtin(cls) -> ThemeCatalog:
        return cls(load_builtin_themes())

    def theme_for(self, theme_id: str) -> Theme:
        """Return the theme with *theme_id*.

        Raises:
            KeyError: If the id is not in the catalog.
        """
        try:
            return self._themes[theme_id]
        except KeyError as exc:
            msg = f"Unknown theme: {theme_id!r}"
            raise KeyError(msg) from exc

    def contains(self, theme_id: str) -> bool:
        return theme_id in self._themes

    def default_theme(self) -> Theme:
        return self._themes[self._default_id]

    def themes(self, *, include_premium: bool = True) -> list[Theme]:
        return [t for t in self._themes.values() if include_premium or not t.premium]

    def themes_by_category(self, category: ThemeCategory | str) -> list[Theme]:
        return [t for t in self._themes.values() if t.category == category]

    def __iter__(self) -> Iterator[Theme]:
        return iter(self._themes.values())

    def __len__(self) -> int:
        return len(self._themes)
