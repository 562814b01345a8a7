"""PublishWorkflow — load, save, publish, and unpublish storefronts.

Publishing is ordered and stops at the first failure::

    validating -> saving -> slug resolution -> publishing -> published

Validation failures never reach the network. A failed save aborts before
publish. Whatever fails, ``is_published`` stays as it was and the session
stays dirty, so nothing the owner did is lost. The workflow never retries.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from storefrontctl.domain.document import decode_document
from storefrontctl.domain.lifecycle import EditorState
from storefrontctl.domain.profile import StoreProfile
from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.slugs import slug_seed
from storefrontctl.domain.theme_engine import ThemeEngine
from storefrontctl.domain.themes import ThemeCatalog
from storefrontctl.domain.validation import validate_document
from storefrontctl.infrastructure.errors import (
    NotFoundError,
    SlugUnavailableError,
    StorefrontError,
)
from storefrontctl.infrastructure.gateway import PersistenceGateway
from storefrontctl.services._helpers import parse_timestamp, utcnow
from storefrontctl.services.base import BaseService
from storefrontctl.services.editor import EditorSession
from storefrontctl.services.result import ErrorCode, ServiceResult
from storefrontctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class PublishWorkflow(BaseService):
    """Moves an EditorSession's document to and from the marketplace API."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        registry: ModuleRegistry,
        themes: ThemeCatalog,
        public_base_url: str | None = None,
    ) -> None:
        super().__init__(gateway)
        self._registry = registry
        self._themes = themes
        self._engine = ThemeEngine(themes)
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None

    # ------------------------------------------------------------------
    # load / refresh
    # ------------------------------------------------------------------

    @traced
    async def load(self, session: EditorSession) -> ServiceResult:
        """Load the persisted document into *session* and enrich it.

        When nothing is stored yet the session keeps its default document.
        """
        op = "load"
        store_id = session.store_id
        generation = session.begin_load()
        warnings: list[str] = []

        with trace_span("fetch_customization"):
            try:
                payload = await self._gateway.fetch_customization(store_id)
            except NotFoundError:
                payload = None
            except StorefrontError as exc:
                return self._error_result(op, exc)

        source = "default"
        if payload is not None:
            try:
                document, decode_warnings = decode_document(payload, self._registry)
            except PydanticValidationError as exc:
                return ServiceResult.failure(
                    op,
                    ErrorCode.VALIDATION_FAILED,
                    "Stored customization is malformed",
                    detail={"issues": [str(e["msg"]) for e in exc.errors()]},
                )
            warnings.extend(decode_warnings)
            if document.custom_css is None and self._themes.contains(document.theme_id):
                self._engine.refresh(document)
            session.replace_document(document)
            source = "remote"

        enriched, profile_warnings = await self._enrich(session, generation)
        warnings.extend(profile_warnings)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "store_id": store_id,
                "source": source,
                "theme_id": session.document.theme_id,
                "modules": len(session.document.modules),
                "enriched": enriched,
                "is_published": session.document.is_published,
            },
            warnings=warnings,
        )

    @traced
    async def refresh(self, session: EditorSession) -> ServiceResult:
        """Re-fetch the store profile and re-enrich under a new load generation."""
        op = "refresh"
        if session.in_flight:
            return self._busy(op, session)
        generation = session.begin_load()
        enriched, warnings = await self._enrich(session, generation)
        return ServiceResult(
            ok=True,
            op=op,
            data={"store_id": session.store_id, "enriched": enriched},
            warnings=warnings,
        )

    async def _enrich(
        self, session: EditorSession, generation: int
    ) -> tuple[list[str], list[str]]:
        """Fetch the profile and enrich. Returns (enriched ids, warnings)."""
        with trace_span("fetch_store_profile"):
            try:
                raw = await self._gateway.fetch_store_profile(session.store_id)
                profile = StoreProfile.model_validate(raw)
            except StorefrontError as exc:
                logger.info("store profile unavailable for %s: %s", session.store_id, exc)
                return [], [f"Store data unavailable; module details may be stale ({exc.message})"]
            except PydanticValidationError:
                logger.info("store profile for %s is malformed", session.store_id)
                return [], ["Store data is malformed; module details may be stale"]
        return session.apply_enrichment(profile, generation), []

    # ------------------------------------------------------------------
    # save
    # ------------------------------------------------------------------

    @traced
    async def save(self, session: EditorSession) -> ServiceResult:
        """Persist the draft as it is at call time."""
        op = "save"
        if session.in_flight:
            return self._busy(op, session)

        previous = session.state
        session.transition(EditorState.SAVING)
        try:
            counter = await self._send_save(session)
        except StorefrontError as exc:
            session.transition(EditorState.DRAFT)
            session.mark_dirty()
            return self._error_result(op, exc)

        clean = session.mark_saved(counter)
        if previous == EditorState.PUBLISHED and clean:
            session.transition(EditorState.PUBLISHED)
        else:
            session.transition(EditorState.DRAFT)

        warnings = [] if clean else ["Edits made during the save are not yet saved"]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "store_id": session.store_id,
                "edit_counter": counter,
                "dirty": session.dirty,
            },
            warnings=warnings,
        )

    async def _send_save(self, session: EditorSession) -> int:
        session.document.touch()
        document, counter = session.snapshot()
        with trace_span("save_customization"):
            await self._gateway.save_customization(
                session.store_id, document, edit_counter=counter
            )
        return counter

    # ------------------------------------------------------------------
    # publish / unpublish
    # ------------------------------------------------------------------

    @traced
    async def publish(self, session: EditorSession) -> ServiceResult:
        """Validate, save, resolve a slug, and publish."""
        op = "publish"
        if session.in_flight:
            return self._busy(op, session)
        document = session.document

        session.transition(EditorState.VALIDATING)
        with trace_span("validate"):
            validation = validate_document(document, self._registry, self._themes)
        if not validation.valid:
            session.transition(EditorState.DRAFT)
            return ServiceResult.failure(
                op,
                ErrorCode.VALIDATION_FAILED,
                "Storefront is not ready to publish",
                detail={"issues": validation.errors},
                warnings=validation.warnings,
            )

        session.transition(EditorState.SAVING)
        try:
            await self._send_save(session)
            slug = await self._resolve_slug(session)
            session.transition(EditorState.PUBLISHING)
            published_at = utcnow()
            response, counter = await self._send_publish(session, published_at)
        except StorefrontError as exc:
            session.transition(EditorState.DRAFT)
            session.mark_dirty()
            return self._error_result(op, exc, warnings=validation.warnings)

        published_at = parse_timestamp(response.get("publishedAt")) or published_at
        slug = str(response.get("slug") or slug)
        document.is_published = True
        document.published_at = published_at
        document.publish_version += 1
        document.slug = slug
        document.public_url = str(response.get("publicUrl") or self._public_url(slug))
        session.mark_saved(counter)
        session.transition(EditorState.PUBLISHED)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "store_id": session.store_id,
                "slug": document.slug,
                "public_url": document.public_url,
                "published_at": published_at.isoformat(),
                "publish_version": document.publish_version,
            },
            warnings=validation.warnings,
        )

    async def _resolve_slug(self, session: EditorSession) -> str:
        preferred = slug_seed(
            session.store_id,
            existing=session.document.slug,
            store_name=session.store_name,
        )
        with trace_span("generate_slug"):
            answer = await self._gateway.generate_slug(session.store_id, preferred)
        slug = answer.get("slug")
        if not answer.get("available") or not slug:
            msg = f"Slug '{slug or preferred}' is not available"
            raise SlugUnavailableError(msg, detail={"preferred": preferred, "suggested": slug})
        return str(slug)

    async def _send_publish(
        self, session: EditorSession, published_at: datetime
    ) -> tuple[dict[str, Any], int]:
        document, counter = session.snapshot()
        document["isPublished"] = True
        document["publishedAt"] = published_at.isoformat().replace("+00:00", "Z")
        with trace_span("publish"):
            response = await self._gateway.publish(
                session.store_id, document, edit_counter=counter
            )
        return response, counter

    def _public_url(self, slug: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/store/{slug}"
        return f"/store/{slug}"

    @traced
    async def unpublish(self, session: EditorSession) -> ServiceResult:
        """Take the storefront offline. The draft is kept."""
        op = "unpublish"
        if session.in_flight:
            return self._busy(op, session)
        try:
            await self._gateway.unpublish(session.store_id)
        except StorefrontError as exc:
            return self._error_result(op, exc)

        session.document.is_published = False
        session.transition(EditorState.DRAFT)
        return ServiceResult(
            ok=True,
            op=op,
            data={"store_id": session.store_id, "is_published": False},
        )

    # ------------------------------------------------------------------
    # status / inventory
    # ------------------------------------------------------------------

    @traced
    async def status(self, store_id: int) -> ServiceResult:
        op = "status"
        try:
            payload = await self._gateway.status(store_id)
        except StorefrontError as exc:
            return self._error_result(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "store_id": store_id,
                "status": payload.get("status", "draft"),
                "is_published": bool(payload.get("isPublished", False)),
                "public_url": payload.get("publicUrl"),
                "slug": payload.get("slug"),
                "published_at": payload.get("publishedAt"),
                "last_modified": payload.get("lastModified"),
            },
        )

    @traced
    async def inventory(self, store_id: int) -> ServiceResult:
        """Active inventory for previewing featured products."""
        op = "inventory"
        try:
            items = await self._gateway.fetch_inventory(store_id)
        except StorefrontError as exc:
            return self._error_result(op, exc)
        return ServiceResult(ok=True, op=op, data={"store_id": store_id, "items": items})

    # ------------------------------------------------------------------

    @staticmethod
    def _busy(op: str, session: EditorSession) -> ServiceResult:
        return ServiceResult.failure(
            op,
            ErrorCode.INVALID_STATE,
            f"Another operation is in progress ({session.state})",
            detail={"state": str(session.state)},
        )

