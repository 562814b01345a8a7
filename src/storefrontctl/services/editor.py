"""EditorSession — exclusive owner of one CustomizationDocument while editing.

The session is the only writer. Every user mutation goes through it so it
can keep three pieces of bookkeeping honest:

* ``edit_counter`` increases by one per mutation and is sent with every
  save, which lets a save that raced newer edits leave ``dirty`` set;
* ``dirty`` is True whenever local state differs from the last good save;
* ``state`` follows the lifecycle in :mod:`storefrontctl.domain.lifecycle`.

Enrichment and loads are not user edits: they never bump the counter.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from storefrontctl.domain.document import CustomizationDocument, decode_document
from storefrontctl.domain.enrichment import DataEnricher
from storefrontctl.domain.lifecycle import IN_FLIGHT_STATES, EditorState, is_valid_transition
from storefrontctl.domain.modules import BaseModule
from storefrontctl.domain.profile import StoreProfile
from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.theme_engine import ThemeEngine
from storefrontctl.domain.themes import Theme, ThemeCatalog
from storefrontctl.domain.types import Direction
from storefrontctl.domain.validation import ValidationResult
from storefrontctl.infrastructure.drafts import DraftMeta, DraftRecord

logger = logging.getLogger(__name__)


class InvalidTransitionError(Exception):
    """Raised when the session is asked to move along an undeclared edge."""


class EditorSession:
    """Editing session for one storefront."""

    def __init__(
        self,
        document: CustomizationDocument,
        *,
        registry: ModuleRegistry,
        themes: ThemeCatalog,
        edit_counter: int = 0,
        dirty: bool = False,
        state: EditorState = EditorState.DRAFT,
        load_generation: int = 0,
        store_name: str | None = None,
    ) -> None:
        self._document = document
        self._registry = registry
        self._themes = themes
        self._engine = ThemeEngine(themes)
        self._enricher = DataEnricher(load_generation)
        self._edit_counter = edit_counter
        self._dirty = dirty
        self._state = state
        self.profile: StoreProfile | None = None
        self._store_name = store_name

    @classmethod
    def create(
        cls,
        store_id: int,
        *,
        registry: ModuleRegistry,
        themes: ThemeCatalog,
        theme_id: str | None = None,
        header_style: str | None = None,
        footer_text: str | None = None,
    ) -> EditorSession:
        """Start a session on a fresh default document."""
        options: dict[str, Any] = {}
        if header_style is not None:
            options["header_style"] = header_style
        if footer_text is not None:
            options["footer_text"] = footer_text
        document = CustomizationDocument.new(
            store_id,
            registry,
            theme_id=theme_id or themes.default_theme().id,
            **options,
        )
        session = cls(document, registry=registry, themes=themes)
        session._engine.refresh(document)
        return session

    # -- read access ------------------------------------------------------

    @property
    def document(self) -> CustomizationDocument:
        return self._document

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    @property
    def themes(self) -> ThemeCatalog:
        return self._themes

    @property
    def store_id(self) -> int:
        return self._document.store_id

    @property
    def store_name(self) -> str | None:
        """Display name from the current profile, else the one cached with the draft."""
        if self.profile is not None:
            return self.profile.store_name
        return self._store_name

    @property
    def edit_counter(self) -> int:
        return self._edit_counter

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._state in IN_FLIGHT_STATES

    @property
    def load_generation(self) -> int:
        return self._enricher.generation

    # -- lifecycle --------------------------------------------------------

    def transition(self, target: EditorState) -> None:
        """Move to *target*.

        Raises:
            InvalidTransitionError: If the edge is not in the lifecycle table.
        """
        if target == self._state:
            return
        if not is_valid_transition(self._state, target):
            msg = f"Cannot move from {self._state} to {target}"
            raise InvalidTransitionError(msg)
        logger.debug("session %s: %s -> %s", self.store_id, self._state, target)
        self._state = target

    def _mutated(self) -> None:
        self._edit_counter += 1
        self._dirty = True
        self._document.touch()
        if self._state == EditorState.PUBLISHED:
            self.transition(EditorState.DRAFT)

    def mark_dirty(self) -> None:
        self._dirty = True

    def mark_saved(self, sent_counter: int) -> bool:
        """Record a successful save of the snapshot taken at *sent_counter*.

        Returns True when the session is now clean; False when edits made
        while the request was in flight keep it dirty.
        """
        if sent_counter == self._edit_counter:
            self._dirty = False
        return not self._dirty

    def snapshot(self) -> tuple[dict[str, Any], int]:
        """Serialize the document as it is right now, with the counter it reflects."""
        return self._document.to_wire(), self._edit_counter

    def confirm_discard(self, confirmed: bool = False) -> bool:
        """Navigation guard: leaving is allowed when clean or explicitly confirmed."""
        return not self._dirty or confirmed

    def replace_document(self, document: CustomizationDocument) -> None:
        """Swap in a freshly loaded document. Not an edit; clears ``dirty``."""
        self._document = document
        self._dirty = False
        self._state = EditorState.PUBLISHED if document.is_published else EditorState.DRAFT

    # -- enrichment -------------------------------------------------------

    def begin_load(self) -> int:
        return self._enricher.begin_load()

    def apply_enrichment(self, profile: StoreProfile | None, generation: int) -> list[str]:
        """Merge store data tagged with *generation*; stale tags are discarded."""
        if profile is not None and self._enricher.is_current(generation):
            self.profile = profile
        return self._enricher.enrich(self._document.modules, profile, generation=generation)

    # -- edits ------------------------------------------------------------

    def add_module(self, module_type: str) -> BaseModule:
        module = self._document.modules.add(module_type)
        self._mutated()
        return module

    def remove_module(self, module_id: str) -> BaseModule | None:
        removed = self._document.modules.remove(module_id)
        if removed is not None:
            self._mutated()
        return removed

    def move_module(self, module_id: str, direction: Direction | str) -> bool:
        moved = self._document.modules.move(module_id, direction)
        if moved:
            self._mutated()
        return moved

    def toggle_module(self, module_id: str) -> bool | None:
        enabled = self._document.modules.toggle(module_id)
        if enabled is not None:
            self._mutated()
        return enabled

    def update_settings(self, module_id: str, partial: Mapping[str, Any]) -> ValidationResult:
        module = self._document.modules.get(module_id)
        before = module.settings.to_wire() if module is not None else None
        result = self._document.modules.update_settings(module_id, partial)
        if module is not None and result.valid and module.settings.to_wire() != before:
            self._mutated()
        return result

    def update_details(
        self,
        module_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> bool:
        changed = self._document.modules.update_details(
            module_id, title=title, description=description
        )
        if changed:
            self._mutated()
        return changed

    def select_theme(self, theme_id: str) -> Theme:
        """Switch theme.

        Raises:
            KeyError: If *theme_id* is not in the catalog.
        """
        theme = self._engine.select(self._document, theme_id)
        self._mutated()
        return theme

    # -- draft persistence ------------------------------------------------

    def to_draft(self) -> DraftRecord:
        return DraftRecord(
            document=self._document.to_wire(),
            meta=DraftMeta(
                edit_counter=self._edit_counter,
                dirty=self._dirty,
                state=str(self._state),
                publish_version=self._document.publish_version,
                load_generation=self._enricher.generation,
                slug=self._document.slug,
                public_url=self._document.public_url,
                store_name=self.store_name,
            ),
        )

    @classmethod
    def from_draft(
        cls,
        record: DraftRecord,
        *,
        registry: ModuleRegistry,
        themes: ThemeCatalog,
    ) -> tuple[EditorSession, list[str]]:
        """Rebuild a session from a cached draft.

        In-flight states are not resumable; a draft caught mid-save comes
        back as a dirty draft.
        """
        document, warnings = decode_document(record.document, registry)
        meta = record.meta
        document.publish_version = meta.publish_version
        document.slug = meta.slug
        document.public_url = meta.public_url

        state = EditorState(meta.state)
        dirty = meta.dirty
        if state in IN_FLIGHT_STATES:
            state = EditorState.DRAFT
            dirty = True
        session = cls(
            document,
            registry=registry,
            themes=themes,
            edit_counter=meta.edit_counter,
            dirty=dirty,
            state=state,
            load_generation=meta.load_generation,
            store_name=meta.store_name,
        )
        return session, warnings
