"""Tests for theme tokens, CSS generation, and theme selection."""

from __future__ import annotations

import pytest

from storefrontctl.domain.document import CustomizationDocument
from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.theme_engine import ThemeEngine, generate_css, tokens
from storefrontctl.domain.themes import ThemeCatalog


class TestTokens:
    def test_core_tokens_first(self, themes: ThemeCatalog) -> None:
        flat = tokens(themes.theme_for("clean-modern"))
        assert list(flat)[:3] == ["--theme-primary", "--theme-secondary", "--theme-accent"]
        assert flat["--theme-primary"] == "#2563eb"
        assert flat["--theme-text-base"] == "1rem"
        assert flat["--theme-space-md"] == "1rem"

    def test_custom_properties_last(self, themes: ThemeCatalog) -> None:
        theme = themes.theme_for("clean-modern")
        flat = tokens(theme)
        assert list(flat)[-len(theme.custom_properties) :] == list(theme.custom_properties)
        assert flat["--hero-overlay"] == "0.2"


class TestGenerateCss:
    def test_root_block(self, themes: ThemeCatalog) -> None:
        css = generate_css(themes.theme_for("clean-modern"))
        assert css.startswith(":root {")
        assert css.rstrip().endswith("}")
        assert "  --theme-primary: #2563eb;" in css.splitlines()

    def test_deterministic(self, themes: ThemeCatalog) -> None:
        theme = themes.theme_for("bold-vibrant")
        assert generate_css(theme) == generate_css(theme)

    def test_differs_between_themes(self, themes: ThemeCatalog) -> None:
        assert generate_css(themes.theme_for("clean-modern")) != generate_css(
            themes.theme_for("rustic-artisanal")
        )


class TestThemeEngine:
    def test_select_applies_theme(self, registry: ModuleRegistry, themes: ThemeCatalog) -> None:
        document = CustomizationDocument.new(7, registry)
        theme = ThemeEngine(themes).select(document, "rustic-artisanal")
        assert document.theme_id == "rustic-artisanal"
        assert document.custom_css == generate_css(theme)
        assert document.global_settings.primary_color == theme.colors.primary
        assert document.global_settings.font_family == theme.typography.font_family.primary
        assert document.global_settings.footer_text == "Powered by HelloNeighbors"

    def test_select_leaves_module_settings_alone(
        self, registry: ModuleRegistry, themes: ThemeCatalog
    ) -> None:
        document = CustomizationDocument.new(7, registry)
        before = document.to_wire()["modules"]
        ThemeEngine(themes).select(document, "bold-brutalist")
        assert document.to_wire()["modules"] == before

    def test_css_independent_of_history(
        self, registry: ModuleRegistry, themes: ThemeCatalog
    ) -> None:
        engine = ThemeEngine(themes)
        direct = CustomizationDocument.new(7, registry)
        engine.select(direct, "vintage-retro")
        hopped = CustomizationDocument.new(7, registry)
        engine.select(hopped, "modern-luxe")
        engine.select(hopped, "vintage-retro")
        assert hopped.custom_css == direct.custom_css

    def test_unknown_theme_leaves_document(
        self, registry: ModuleRegistry, themes: ThemeCatalog
    ) -> None:
        document = CustomizationDocument.new(7, registry)
        with pytest.raises(KeyError):
            ThemeEngine(themes).select(document, "neon-dreams")
        assert document.theme_id == "clean-modern"
        assert document.custom_css is None

    def test_refresh_recomputes_current_theme(
        self, registry: ModuleRegistry, themes: ThemeCatalog
    ) -> None:
        document = CustomizationDocument.new(7, registry, theme_id="gallery-expressive")
        ThemeEngine(themes).refresh(document)
        assert document.custom_css == generate_css(themes.theme_for("gallery-expressive"))
