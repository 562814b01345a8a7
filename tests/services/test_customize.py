"""Tests for CustomizeService — local module and theme edits."""

from __future__ import annotations

from storefrontctl.services.customize import CustomizeService, module_summary
from storefrontctl.services.editor import EditorSession
from storefrontctl.services.result import ErrorCode


class TestModuleOps:
    def test_list_modules(self, session: EditorSession) -> None:
        result = CustomizeService(session).list_modules()
        assert result.ok
        assert result.op == "list_modules"
        assert result.data["count"] == 8
        assert result.data["items"][0] == {
            "id": "hero-banner-1",
            "type": "hero-banner",
            "title": "Hero Banner",
            "order": 0,
            "enabled": True,
        }

    def test_list_templates(self, session: EditorSession) -> None:
        result = CustomizeService(session).list_templates()
        assert result.data["count"] == 12
        hero = next(t for t in result.data["items"] if t["type"] == "hero-banner")
        assert hero["category"] == "content"
        assert hero["premium"] is False

    def test_add_module(self, session: EditorSession) -> None:
        result = CustomizeService(session).add_module("newsletter-signup")
        assert result.ok
        assert result.data["id"] == "newsletter-signup-9"
        assert result.data["edit_counter"] == 1
        assert result.data["dirty"] is True

    def test_add_unknown_type(self, session: EditorSession) -> None:
        result = CustomizeService(session).add_module("carousel")
        assert not result.ok
        assert result.error.code == ErrorCode.NOT_FOUND
        assert "hero-banner" in result.error.detail["known"]

    def test_remove_module(self, session: EditorSession) -> None:
        result = CustomizeService(session).remove_module("search-filter-4")
        assert result.ok
        assert result.data["remaining"] == 7

    def test_remove_unknown(self, session: EditorSession) -> None:
        result = CustomizeService(session).remove_module("nope-99")
        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.message == "No module 'nope-99' in this storefront"

    def test_move_module(self, session: EditorSession) -> None:
        result = CustomizeService(session).move_module("contact-form-7", "up")
        assert result.ok
        assert result.data["moved"] is True
        assert result.data["order"] == 5

    def test_move_at_edge_warns(self, session: EditorSession) -> None:
        result = CustomizeService(session).move_module("hero-banner-1", "up")
        assert result.ok
        assert result.data["moved"] is False
        assert result.warnings == ["'hero-banner-1' is already at the up edge"]
        assert session.edit_counter == 0

    def test_toggle_module(self, session: EditorSession) -> None:
        result = CustomizeService(session).toggle_module("search-filter-4")
        assert result.data["enabled"] is False

    def test_toggle_unknown(self, session: EditorSession) -> None:
        assert CustomizeService(session).toggle_module("nope-99").error.code == "NOT_FOUND"

    def test_update_settings(self, session: EditorSession) -> None:
        result = CustomizeService(session).update_settings(
            "featured-products-6", {"maxProducts": 8, "products_per_row": 4}
        )
        assert result.ok
        assert result.data["settings"]["maxProducts"] == 8
        assert result.data["settings"]["productsPerRow"] == 4

    def test_update_settings_invalid(self, session: EditorSession) -> None:
        result = CustomizeService(session).update_settings(
            "featured-products-6", {"productsPerRow": 7}
        )
        assert not result.ok
        assert result.error.code == ErrorCode.VALIDATION_FAILED
        assert result.error.detail["issues"]

    def test_update_settings_refuses_enriched(self, session: EditorSession) -> None:
        result = CustomizeService(session).update_settings(
            "business-address-3", {"businessAddress": {"city": "Elsewhere"}}
        )
        assert result.ok
        assert result.warnings == [
            "'businessAddress' is managed from store data and cannot be edited"
        ]

    def test_update_details(self, session: EditorSession) -> None:
        result = CustomizeService(session).update_details("hero-banner-1", title="Welcome")
        assert result.data["title"] == "Welcome"

    def test_module_summary(self, session: EditorSession) -> None:
        module = session.document.modules.get("policy-section-8")
        assert module_summary(module)["order"] == 7


class TestThemeOps:
    def test_list_themes_marks_current(self, session: EditorSession) -> None:
        result = CustomizeService(session).list_themes()
        assert result.data["count"] == 10
        assert result.data["current"] == "clean-modern"
        current = [t["id"] for t in result.data["items"] if t["current"]]
        assert current == ["clean-modern"]

    def test_list_themes_filters(self, session: EditorSession) -> None:
        service = CustomizeService(session)
        assert service.list_themes(category="luxe").data["count"] == 1
        assert service.list_themes(category="luxe", include_premium=False).data["count"] == 0
        assert service.list_themes(include_premium=False).data["count"] == 9

    def test_select_theme(self, session: EditorSession) -> None:
        result = CustomizeService(session).select_theme("rustic-artisanal")
        assert result.ok
        assert result.data["theme_id"] == "rustic-artisanal"
        assert result.data["primary_color"] == "#92400e"
        assert result.data["dirty"] is True

    def test_select_unknown_theme(self, session: EditorSession) -> None:
        result = CustomizeService(session).select_theme("neon-dreams")
        assert result.error.code == ErrorCode.NOT_FOUND
        assert session.document.theme_id == "clean-modern"

    def test_theme_css_defaults_to_current(self, session: EditorSession) -> None:
        result = CustomizeService(session).theme_css()
        assert result.data["theme_id"] == "clean-modern"
        assert result.data["css"] == session.document.custom_css

    def test_theme_css_unknown(self, session: EditorSession) -> None:
        assert CustomizeService(session).theme_css("neon-dreams").error.code == "NOT_FOUND"


class TestPreview:
    def test_preview(self, session: EditorSession) -> None:
        result = CustomizeService(session).preview(device="mobile", selected="hero-banner-1")
        assert result.ok
        assert result.data["device"] == "mobile"
        assert result.data["modules"][0]["selected"] is True
        assert result.data["modules"][0]["region"] == "main"

    def test_preview_idle(self, session: EditorSession) -> None:
        result = CustomizeService(session).preview(live=False)
        assert result.data["live"] is False
        assert result.data["modules"] == []

    def test_preview_with_unknown_theme(self, session: EditorSession) -> None:
        session.document.theme_id = "neon-dreams"
        result = CustomizeService(session).preview()
        assert result.error.code == ErrorCode.VALIDATION_FAILED
