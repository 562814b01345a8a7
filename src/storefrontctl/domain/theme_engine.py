"""ThemeEngine — theme selection and deterministic stylesheet generation.

``generate_css`` is a pure function of the theme: the same theme always
yields byte-identical CSS regardless of what the document looked like
before. Selecting a theme never touches module settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storefrontctl.domain.themes import Theme, ThemeCatalog
from storefrontctl.infrastructure.templates import template_environment

if TYPE_CHECKING:
    from storefrontctl.domain.document import CustomizationDocument

_SCALE = ("xs", "sm", "base", "lg", "xl", "2xl", "3xl", "4xl")
_SPACING = ("xs", "sm", "md", "lg", "xl", "2xl", "3xl", "4xl")
_SIZES = ("sm", "md", "lg", "xl")


def tokens(theme: Theme) -> dict[str, str]:
    """Flatten *theme* into ordered ``--theme-*`` custom properties.

    Custom properties declared by the theme come last, in declaration order.
    """
    colors = theme.colors
    typography = theme.typography
    layout = theme.layout
    effects = theme.effects

    flat: dict[str, str] = {
        "--theme-primary": colors.primary,
        "--theme-secondary": colors.secondary,
        "--theme-accent": colors.accent,
        "--theme-background": colors.background,
        "--theme-surface": colors.surface,
        "--theme-text-primary": colors.text.primary,
        "--theme-text-secondary": colors.text.secondary,
        "--theme-text-muted": colors.text.muted,
        "--theme-border": colors.border,
        "--theme-shadow": colors.shadow,
        "--theme-font-primary": typography.font_family.primary,
        "--theme-font-secondary": typography.font_family.secondary
        or typography.font_family.primary,
    }
    for step in _SCALE:
        flat[f"--theme-text-{step}"] = typography.font_size.get(step, "")
    for step in _SPACING:
        flat[f"--theme-space-{step}"] = theme.spacing.get(step, "")
    flat["--theme-max-width"] = layout.max_width
    flat["--theme-container-padding"] = layout.container_padding
    for size in _SIZES:
        flat[f"--theme-radius-{size}"] = layout.border_radius.get(size, "")
    for size in _SIZES:
        flat[f"--theme-shadow-{size}"] = effects.box_shadow.get(size, "")
    flat["--theme-transition-fast"] = effects.transition.fast
    flat["--theme-transition-normal"] = effects.transition.normal
    flat["--theme-transition-slow"] = effects.transition.slow
    flat.update(theme.custom_properties)
    return flat


def generate_css(theme: Theme) -> str:
    """Render the ``:root { ... }`` block for *theme*."""
    template = template_environment().get_template("theme.css.j2")
    return template.render(tokens=list(tokens(theme).items()))


class ThemeEngine:
    """Applies catalog themes to customization documents."""

    def __init__(self, catalog: ThemeCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> ThemeCatalog:
        return self._catalog

    def select(self, document: CustomizationDocument, theme_id: str) -> Theme:
        """Switch *document* to *theme_id* and recompute derived styling.

        Raises:
            KeyError: If *theme_id* is not in the catalog.
        """
        theme = self._catalog.theme_for(theme_id)
        self.apply(document, theme)
        return theme

    def apply(self, document: CustomizationDocument, theme: Theme) -> None:
        document.theme_id = theme.id
        document.custom_css = generate_css(theme)
        document.global_settings = document.global_settings.model_copy(
            update={
                "primary_color": theme.colors.primary,
                "secondary_color": theme.colors.secondary,
                "font_family": theme.typography.font_family.primary,
            }
        )

    def refresh(self, document: CustomizationDocument) -> None:
        """Recompute derived styling for the document's current theme."""
        self.apply(document, self._catalog.theme_for(document.theme_id))
