"""CustomizationDocument — the aggregate root — and its persisted codec.

The persisted shape is fixed by the marketplace API::

    {storeId, themeId,
     modules: [{id, type, title, content, settings, order, isVisible}],
     globalSettings: {primaryColor, secondaryColor, fontFamily,
                      headerStyle, footerText},
     customCss?, isPublished, publishedAt?, lastModified}

``isVisible`` on the wire is ``enabled`` in Python. Module description and
icon are not persisted; they come from the registry on decode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import Field, ValidationError

from storefrontctl.domain.module_list import ModuleList, default_modules
from storefrontctl.domain.modules import MODULE_CLASSES, BaseModule
from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.settings import WireModel
from storefrontctl.domain.themes import DEFAULT_THEME_ID
from storefrontctl.domain.types import ModuleType

log = structlog.get_logger(__name__)

DEFAULT_HEADER_STYLE = "modern"
DEFAULT_FOOTER_TEXT = "Powered by HelloNeighbors"


class GlobalSettings(WireModel):
    """Store-wide styling. Colors and font derive from the theme."""

    model_config = {"frozen": True}

    primary_color: str = ""
    secondary_color: str = ""
    font_family: str = ""
    header_style: str = DEFAULT_HEADER_STYLE
    footer_text: str = DEFAULT_FOOTER_TEXT


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class CustomizationDocument:
    """Everything needed to render and publish one storefront."""

    store_id: int
    modules: ModuleList
    theme_id: str = DEFAULT_THEME_ID
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    custom_css: str | None = None
    is_published: bool = False
    published_at: datetime | None = None
    publish_version: int = 0
    last_modified: datetime = field(default_factory=_utcnow)
    slug: str | None = None
    public_url: str | None = None

    @classmethod
    def new(
        cls,
        store_id: int,
        registry: ModuleRegistry,
        *,
        theme_id: str = DEFAULT_THEME_ID,
        header_style: str = DEFAULT_HEADER_STYLE,
        footer_text: str = DEFAULT_FOOTER_TEXT,
    ) -> CustomizationDocument:
        """Create a first-time document with the default module set."""
        return cls(
            store_id=store_id,
            modules=default_modules(registry),
            theme_id=theme_id,
            global_settings=GlobalSettings(header_style=header_style, footer_text=footer_text),
        )

    def touch(self) -> None:
        self.last_modified = _utcnow()

    def to_wire(self) -> dict[str, Any]:
        return encode_document(self)


# ---------------------------------------------------------------------------
# Wire codec
# ---------------------------------------------------------------------------


class WireModule(WireModel):
    id: str | None = None
    type: str
    title: str | None = None
    content: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    order: int | None = None
    is_visible: bool = True


class WireDocument(WireModel):
    store_id: int
    theme_id: str = DEFAULT_THEME_ID
    modules: list[dict[str, Any]] = Field(default_factory=list)
    global_settings: GlobalSettings = Field(default_factory=GlobalSettings)
    custom_css: str | None = None
    is_published: bool = False
    published_at: datetime | None = None
    last_modified: datetime | None = None


def _format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def encode_module(module: BaseModule) -> dict[str, Any]:
    return {
        "id": module.id,
        "type": module.type,
        "title": module.title,
        "content": dict(module.content),
        "settings": module.settings.to_wire(),
        "order": module.order,
        "isVisible": module.enabled,
    }


def encode_document(document: CustomizationDocument) -> dict[str, Any]:
    """Serialize *document* to the persisted camelCase shape."""
    data: dict[str, Any] = {
        "storeId": document.store_id,
        "themeId": document.theme_id,
        "modules": [encode_module(m) for m in document.modules.ordered()],
        "globalSettings": document.global_settings.model_dump(mode="json", by_alias=True),
    }
    if document.custom_css is not None:
        data["customCss"] = document.custom_css
    data["isPublished"] = document.is_published
    if document.published_at is not None:
        data["publishedAt"] = _format_timestamp(document.published_at)
    data["lastModified"] = _format_timestamp(document.last_modified)
    return data


def decode_module(
    raw: dict[str, Any],
    index: int,
    registry: ModuleRegistry,
    warnings: list[str],
) -> BaseModule | None:
    """Decode one persisted module; None (with a warning) if it cannot be kept."""
    module_type = raw.get("type")
    if not isinstance(module_type, str) or not registry.contains(module_type):
        message = f"Dropped module with unknown type {module_type!r} at position {index}"
        log.warning("document.unknown_module_type", module_type=module_type, index=index)
        warnings.append(message)
        return None

    wire = WireModule.model_validate(raw)
    template = registry.template_for(module_type)
    settings_cls = type(template.default_settings)
    try:
        settings = settings_cls.model_validate(wire.settings)
    except ValidationError:
        log.warning("document.invalid_settings", module_type=module_type, index=index)
        warnings.append(f"Invalid settings for {module_type} at position {index}; defaults used")
        settings = template.new_settings()

    return MODULE_CLASSES[ModuleType(module_type)](
        id=wire.id or f"{module_type}-{index}",
        title=wire.title or template.name,
        description=template.description,
        icon=template.icon,
        enabled=wire.is_visible,
        order=wire.order if wire.order is not None and wire.order >= 0 else index,
        content=wire.content,
        settings=settings,
    )


def decode_document(
    data: dict[str, Any],
    registry: ModuleRegistry,
) -> tuple[CustomizationDocument, list[str]]:
    """Rebuild a document from its persisted shape.

    Unknown module types are dropped and sparse orders are repaired.

    Returns:
        The document and any warnings raised while decoding.

    Raises:
        pydantic.ValidationError: If the top-level shape is malformed.
    """
    wire = WireDocument.model_validate(data)
    warnings: list[str] = []
    decoded = [
        decode_module(raw, index, registry, warnings) for index, raw in enumerate(wire.modules)
    ]
    modules = ModuleList(registry, [m for m in decoded if m is not None])
    if modules.normalize():
        log.info("document.orders_repaired", store_id=wire.store_id)

    document = CustomizationDocument(
        store_id=wire.store_id,
        modules=modules,
        theme_id=wire.theme_id,
        global_settings=wire.global_settings,
        custom_css=wire.custom_css,
        is_published=wire.is_published,
        published_at=wire.published_at,
    )
    if wire.last_modified is not None:
        document.last_modified = wire.last_modified
    return document, warnings
