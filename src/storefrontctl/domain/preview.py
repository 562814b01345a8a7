"""PreviewRenderer — a pure function from (document, mode) to a render plan.

The plan lists enabled modules in display order with the theme tokens and
wire-keyed settings a front end needs to draw them. Building a plan never
mutates the document.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from storefrontctl.domain.settings import (
    AllProductsSettings,
    FeaturedProductsSettings,
    ModuleSettings,
    ProductCategoriesSettings,
)
from storefrontctl.domain.theme_engine import tokens
from storefrontctl.domain.themes import ThemeCatalog
from storefrontctl.domain.types import DeviceMode, ModuleType, Region

if TYPE_CHECKING:
    from storefrontctl.domain.document import CustomizationDocument
    from storefrontctl.domain.modules import BaseModule

FOOTER_TYPES: frozenset[str] = frozenset({ModuleType.POLICY_SECTION, ModuleType.CONTACT_FORM})

# Upper bound on grid columns per device; None means "as configured".
DEVICE_COLUMN_LIMIT: dict[DeviceMode, int | None] = {
    DeviceMode.MOBILE: 1,
    DeviceMode.TABLET: 2,
    DeviceMode.DESKTOP: None,
}


@dataclass(frozen=True)
class PreviewMode:
    device: DeviceMode = DeviceMode.DESKTOP
    is_live_preview: bool = True
    selected_module_id: str | None = None


class ModuleDescriptor(BaseModel):
    """Everything needed to draw one module."""

    model_config = {"frozen": True}

    id: str
    type: str
    title: str
    order: int
    region: Region
    settings: dict[str, Any]
    tokens: dict[str, str] = Field(default_factory=dict)
    columns: int | None = None
    selected: bool = False
    products: list[dict[str, Any]] = Field(default_factory=list)


class RenderPlan(BaseModel):
    model_config = {"frozen": True}

    store_id: int
    theme_id: str
    device: DeviceMode
    live: bool
    tokens: dict[str, str] = Field(default_factory=dict)
    modules: list[ModuleDescriptor] = Field(default_factory=list)

    def region(self, region: Region) -> list[ModuleDescriptor]:
        return [m for m in self.modules if m.region == region]


def configured_columns(settings: ModuleSettings) -> int | None:
    match settings:
        case (
            FeaturedProductsSettings(products_per_row=n) | AllProductsSettings(products_per_row=n)
        ):
            return n
        case ProductCategoriesSettings(categories_per_row=n):
            return n
        case _:
            return None


def clamp_columns(columns: int | None, device: DeviceMode) -> int | None:
    limit = DEVICE_COLUMN_LIMIT[device]
    if columns is None or limit is None:
        return columns
    return min(columns, limit)


def featured_products(
    settings: FeaturedProductsSettings,
    inventory: Sequence[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Pick the inventory items a featured-products module shows.

    Explicit ``productIds`` win; otherwise the first ``maxProducts`` items.
    """
    if settings.product_ids:
        wanted = {str(pid) for pid in settings.product_ids}
        return [
            item
            for item in inventory
            if str(item.get("productId", item.get("itemId", ""))) in wanted
        ]
    return list(inventory[: settings.max_products])


def _describe(
    module: BaseModule,
    mode: PreviewMode,
    theme_tokens: dict[str, str],
    inventory: Sequence[dict[str, Any]],
) -> ModuleDescriptor:
    products: list[dict[str, Any]] = []
    if isinstance(module.settings, FeaturedProductsSettings):
        products = featured_products(module.settings, inventory)
    return ModuleDescriptor(
        id=module.id,
        type=module.type,
        title=module.title,
        order=module.order,
        region=Region.FOOTER if module.type in FOOTER_TYPES else Region.MAIN,
        settings=module.settings.to_wire(),
        tokens=theme_tokens,
        columns=clamp_columns(configured_columns(module.settings), mode.device),
        selected=module.id == mode.selected_module_id,
        products=products,
    )


def render(
    document: CustomizationDocument,
    mode: PreviewMode,
    themes: ThemeCatalog,
    *,
    inventory: Sequence[dict[str, Any]] = (),
) -> RenderPlan:
    """Build the render plan for *document* under *mode*.

    With live preview off the plan is idle: theme and device only, no modules.

    Raises:
        KeyError: If the document's theme is not in *themes*.
    """
    theme = themes.theme_for(document.theme_id)
    if not mode.is_live_preview:
        return RenderPlan(
            store_id=document.store_id,
            theme_id=theme.id,
            device=mode.device,
            live=False,
        )
    theme_tokens = tokens(theme)
    return RenderPlan(
        store_id=document.store_id,
        theme_id=theme.id,
        device=mode.device,
        live=True,
        tokens=theme_tokens,
        modules=[
            _describe(m, mode, theme_tokens, inventory) for m in document.modules.enabled()
        ],
    )


class PreviewRenderer:
    """Binds :func:`render` to a theme catalog."""

    def __init__(self, themes: ThemeCatalog) -> None:
        self._themes = themes

    def render(
        self,
        document: CustomizationDocument,
        mode: PreviewMode,
        *,
        inventory: Sequence[dict[str, Any]] = (),
    ) -> RenderPlan:
        return render(document, mode, self._themes, inventory=inventory)
