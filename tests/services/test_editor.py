"""Tests for EditorSession bookkeeping: counter, dirty flag, lifecycle."""

from __future__ import annotations

import pytest

from storefrontctl.domain.lifecycle import EditorState
from storefrontctl.domain.profile import StoreProfile
from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.themes import ThemeCatalog
from storefrontctl.infrastructure.drafts import DraftMeta, DraftRecord
from storefrontctl.services.editor import EditorSession, InvalidTransitionError


class TestCreate:
    def test_fresh_session(self, session: EditorSession) -> None:
        assert session.store_id == 42
        assert session.edit_counter == 0
        assert not session.dirty
        assert session.state == EditorState.DRAFT
        assert not session.in_flight

    def test_css_generated_for_theme(self, session: EditorSession) -> None:
        assert session.document.custom_css is not None
        assert session.document.global_settings.primary_color == "#2563eb"

    def test_options(self, registry: ModuleRegistry, themes: ThemeCatalog) -> None:
        session = EditorSession.create(
            1,
            registry=registry,
            themes=themes,
            theme_id="rustic-artisanal",
            header_style="classic",
            footer_text="Grown with care",
        )
        assert session.document.theme_id == "rustic-artisanal"
        assert session.document.global_settings.header_style == "classic"
        assert session.document.global_settings.footer_text == "Grown with care"


class TestEdits:
    def test_each_edit_bumps_counter(self, session: EditorSession) -> None:
        session.add_module("testimonials")
        session.toggle_module("search-filter-4")
        session.move_module("hero-banner-1", "down")
        assert session.edit_counter == 3
        assert session.dirty

    def test_noop_edits_do_not_count(self, session: EditorSession) -> None:
        assert not session.move_module("hero-banner-1", "up")
        assert session.remove_module("nope-99") is None
        assert session.toggle_module("nope-99") is None
        assert not session.update_details("nope-99", title="x")
        assert session.edit_counter == 0
        assert not session.dirty

    def test_rejected_settings_do_not_count(self, session: EditorSession) -> None:
        result = session.update_settings("hero-banner-1", {"overlayOpacity": 9})
        assert not result.valid
        assert session.edit_counter == 0

    def test_enriched_only_patch_does_not_count(self, session: EditorSession) -> None:
        result = session.update_settings("policy-section-8", {"businessHours": []})
        assert result.valid
        assert result.warnings
        assert session.edit_counter == 0

    def test_unchanged_value_does_not_count(self, session: EditorSession) -> None:
        session.update_settings("hero-banner-1", {"title": "Welcome to Our Farm"})
        assert session.edit_counter == 0

    def test_select_theme_counts(self, session: EditorSession) -> None:
        theme = session.select_theme("bold-vibrant")
        assert theme.id == "bold-vibrant"
        assert session.edit_counter == 1

    def test_select_unknown_theme(self, session: EditorSession) -> None:
        with pytest.raises(KeyError):
            session.select_theme("neon-dreams")
        assert session.edit_counter == 0

    def test_edit_drops_published_to_draft(
        self, registry: ModuleRegistry, themes: ThemeCatalog, session: EditorSession
    ) -> None:
        published = EditorSession(
            session.document, registry=registry, themes=themes, state=EditorState.PUBLISHED
        )
        published.toggle_module("hero-banner-1")
        assert published.state == EditorState.DRAFT
        assert published.dirty


class TestSaveBookkeeping:
    def test_mark_saved_with_current_counter_cleans(self, session: EditorSession) -> None:
        session.add_module("testimonials")
        _, counter = session.snapshot()
        assert session.mark_saved(counter)
        assert not session.dirty

    def test_mark_saved_with_stale_counter_stays_dirty(self, session: EditorSession) -> None:
        session.add_module("testimonials")
        _, counter = session.snapshot()
        session.toggle_module("hero-banner-1")
        assert not session.mark_saved(counter)
        assert session.dirty

    def test_snapshot_is_detached(self, session: EditorSession) -> None:
        document, _ = session.snapshot()
        session.toggle_module("hero-banner-1")
        hero = next(m for m in document["modules"] if m["id"] == "hero-banner-1")
        assert hero["isVisible"] is True

    def test_confirm_discard(self, session: EditorSession) -> None:
        assert session.confirm_discard()
        session.add_module("testimonials")
        assert not session.confirm_discard()
        assert session.confirm_discard(confirmed=True)


class TestTransitions:
    def test_valid_path(self, session: EditorSession) -> None:
        session.transition(EditorState.VALIDATING)
        assert session.in_flight
        session.transition(EditorState.SAVING)
        session.transition(EditorState.PUBLISHING)
        session.transition(EditorState.PUBLISHED)
        assert not session.in_flight

    def test_same_state_is_noop(self, session: EditorSession) -> None:
        session.transition(EditorState.DRAFT)
        assert session.state == EditorState.DRAFT

    def test_invalid_edge_raises(self, session: EditorSession) -> None:
        with pytest.raises(InvalidTransitionError, match="draft to publishing"):
            session.transition(EditorState.PUBLISHING)


class TestEnrichment:
    def test_current_generation(self, session: EditorSession, profile: StoreProfile) -> None:
        generation = session.begin_load()
        enriched = session.apply_enrichment(profile, generation)
        assert "policy-section-8" in enriched
        assert session.profile is profile
        assert session.edit_counter == 0
        assert not session.dirty

    def test_stale_generation(self, session: EditorSession, profile: StoreProfile) -> None:
        stale = session.begin_load()
        session.begin_load()
        assert session.apply_enrichment(profile, stale) == []
        assert session.profile is None


class TestDraftRoundTrip:
    def test_meta_preserved(
        self, session: EditorSession, registry: ModuleRegistry, themes: ThemeCatalog
    ) -> None:
        session.add_module("testimonials")
        session.document.slug = "green-acres"
        session.document.publish_version = 3
        session.begin_load()

        restored, warnings = EditorSession.from_draft(
            session.to_draft(), registry=registry, themes=themes
        )

        assert warnings == []
        assert restored.edit_counter == 1
        assert restored.dirty
        assert restored.load_generation == 1
        assert restored.document.slug == "green-acres"
        assert restored.document.publish_version == 3
        assert restored.document.modules.ids() == session.document.modules.ids()

    def test_store_name_survives_without_profile(
        self,
        session: EditorSession,
        profile: StoreProfile,
        registry: ModuleRegistry,
        themes: ThemeCatalog,
    ) -> None:
        session.apply_enrichment(profile, session.begin_load())

        restored, _ = EditorSession.from_draft(
            session.to_draft(), registry=registry, themes=themes
        )

        assert restored.profile is None
        assert restored.store_name == "Green Acres Farm & Dairy"

    def test_in_flight_state_not_resumed(
        self, session: EditorSession, registry: ModuleRegistry, themes: ThemeCatalog
    ) -> None:
        record = DraftRecord(
            document=session.document.to_wire(),
            meta=DraftMeta(edit_counter=2, dirty=False, state="saving"),
        )
        restored, _ = EditorSession.from_draft(record, registry=registry, themes=themes)
        assert restored.state == EditorState.DRAFT
        assert restored.dirty

    def test_replace_document_clears_dirty(self, session: EditorSession) -> None:
        session.add_module("testimonials")
        document = session.document
        document.is_published = True
        session.replace_document(document)
        assert not session.dirty
        assert session.state == EditorState.PUBLISHED
