"""CustomizeService — local, offline edits to an EditorSession.

Every method returns a ServiceResult so the CLI can render module and theme
edits the same way it renders network operations. Nothing here touches
the network; ``preview`` takes inventory as an argument.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from storefrontctl.domain.modules import BaseModule
from storefrontctl.domain.preview import PreviewMode, PreviewRenderer
from storefrontctl.domain.theme_engine import generate_css
from storefrontctl.domain.types import DeviceMode, Direction
from storefrontctl.services.editor import EditorSession
from storefrontctl.services.result import ErrorCode, ServiceResult
from storefrontctl.services.telemetry import traced

logger = logging.getLogger(__name__)


def module_summary(module: BaseModule) -> dict[str, Any]:
    return {
        "id": module.id,
        "type": module.type,
        "title": module.title,
        "order": module.order,
        "enabled": module.enabled,
    }


class CustomizeService:
    """Module and theme edits on one session."""

    def __init__(self, session: EditorSession) -> None:
        self._session = session

    @property
    def session(self) -> EditorSession:
        return self._session

    def _unknown_module(self, op: str, module_id: str) -> ServiceResult:
        return ServiceResult.failure(
            op,
            ErrorCode.NOT_FOUND,
            f"No module '{module_id}' in this storefront",
            detail={"module_id": module_id, "known": self._session.document.modules.ids()},
        )

    def _edited(
        self, op: str, data: dict[str, Any], warnings: list[str] | None = None
    ) -> ServiceResult:
        data = {
            **data,
            "edit_counter": self._session.edit_counter,
            "dirty": self._session.dirty,
        }
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings or [])

    # -- modules ----------------------------------------------------------

    @traced
    def list_modules(self) -> ServiceResult:
        modules = self._session.document.modules.ordered()
        return ServiceResult(
            ok=True,
            op="list_modules",
            data={
                "items": [module_summary(m) for m in modules],
                "count": len(modules),
            },
        )

    @traced
    def list_templates(self, *, include_premium: bool = True) -> ServiceResult:
        templates = self._session.registry.templates(include_premium=include_premium)
        return ServiceResult(
            ok=True,
            op="list_templates",
            data={
                "items": [
                    {
                        "type": str(t.type),
                        "name": t.name,
                        "category": str(t.category),
                        "description": t.description,
                        "premium": t.premium,
                    }
                    for t in templates
                ],
                "count": len(templates),
            },
        )

    @traced
    def add_module(self, module_type: str) -> ServiceResult:
        op = "add_module"
        if not self._session.registry.contains(module_type):
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"Unknown module type '{module_type}'",
                detail={"known": [str(t.type) for t in self._session.registry]},
            )
        module = self._session.add_module(module_type)
        return self._edited(op, module_summary(module))

    @traced
    def remove_module(self, module_id: str) -> ServiceResult:
        op = "remove_module"
        removed = self._session.remove_module(module_id)
        if removed is None:
            return self._unknown_module(op, module_id)
        remaining = len(self._session.document.modules)
        return self._edited(op, {**module_summary(removed), "remaining": remaining})

    @traced
    def move_module(self, module_id: str, direction: Direction | str) -> ServiceResult:
        op = "move_module"
        module = self._session.document.modules.get(module_id)
        if module is None:
            return self._unknown_module(op, module_id)
        moved = self._session.move_module(module_id, direction)
        edge = Direction(direction)
        warnings = [] if moved else [f"'{module_id}' is already at the {edge} edge"]
        return self._edited(op, {**module_summary(module), "moved": moved}, warnings)

    @traced
    def toggle_module(self, module_id: str) -> ServiceResult:
        op = "toggle_module"
        enabled = self._session.toggle_module(module_id)
        if enabled is None:
            return self._unknown_module(op, module_id)
        module = self._session.document.modules.get(module_id)
        assert module is not None
        return self._edited(op, module_summary(module))

    @traced
    def update_settings(self, module_id: str, partial: Mapping[str, Any]) -> ServiceResult:
        op = "update_settings"
        module = self._session.document.modules.get(module_id)
        if module is None:
            return self._unknown_module(op, module_id)
        result = self._session.update_settings(module_id, partial)
        if not result.valid:
            return ServiceResult.failure(
                op,
                ErrorCode.VALIDATION_FAILED,
                f"Invalid settings for '{module_id}'",
                detail={"issues": list(result.errors)},
                warnings=list(result.warnings),
            )
        return self._edited(
            op,
            {"id": module_id, "type": module.type, "settings": module.settings.to_wire()},
            list(result.warnings),
        )

    @traced
    def update_details(
        self,
        module_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        op = "update_details"
        if not self._session.update_details(module_id, title=title, description=description):
            return self._unknown_module(op, module_id)
        module = self._session.document.modules.get(module_id)
        assert module is not None
        return self._edited(op, {**module_summary(module), "description": module.description})

    # -- themes -----------------------------------------------------------

    @traced
    def list_themes(
        self, *, category: str | None = None, include_premium: bool = True
    ) -> ServiceResult:
        catalog = self._session.themes
        themes = (
            catalog.themes_by_category(category)
            if category
            else catalog.themes(include_premium=include_premium)
        )
        if category and not include_premium:
            themes = [t for t in themes if not t.premium]
        current = self._session.document.theme_id
        return ServiceResult(
            ok=True,
            op="list_themes",
            data={
                "items": [
                    {
                        "id": t.id,
                        "name": t.name,
                        "category": str(t.category),
                        "premium": t.premium,
                        "current": t.id == current,
                    }
                    for t in themes
                ],
                "count": len(themes),
                "current": current,
            },
        )

    @traced
    def select_theme(self, theme_id: str) -> ServiceResult:
        op = "select_theme"
        try:
            theme = self._session.select_theme(theme_id)
        except KeyError:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"Unknown theme '{theme_id}'",
                detail={"known": [t.id for t in self._session.themes]},
            )
        logger.debug("store %s: theme -> %s", self._session.store_id, theme.id)
        settings = self._session.document.global_settings
        return self._edited(
            op,
            {
                "theme_id": theme.id,
                "name": theme.name,
                "primary_color": settings.primary_color,
                "font_family": settings.font_family,
            },
        )

    @traced
    def theme_css(self, theme_id: str | None = None) -> ServiceResult:
        op = "theme_css"
        target = theme_id or self._session.document.theme_id
        try:
            theme = self._session.themes.theme_for(target)
        except KeyError:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"Unknown theme '{target}'")
        css = generate_css(theme)
        return ServiceResult(ok=True, op=op, data={"theme_id": theme.id, "css": css})

    # -- preview ----------------------------------------------------------

    @traced
    def preview(
        self,
        *,
        device: DeviceMode | str = DeviceMode.DESKTOP,
        live: bool = True,
        selected: str | None = None,
        inventory: Sequence[dict[str, Any]] = (),
    ) -> ServiceResult:
        op = "preview"
        mode = PreviewMode(
            device=DeviceMode(device), is_live_preview=live, selected_module_id=selected
        )
        try:
            plan = PreviewRenderer(self._session.themes).render(
                self._session.document, mode, inventory=inventory
            )
        except KeyError:
            return ServiceResult.failure(
                op,
                ErrorCode.VALIDATION_FAILED,
                f"Theme '{self._session.document.theme_id}' is not available",
            )
        return ServiceResult(ok=True, op=op, data=plan.model_dump(mode="json"))
