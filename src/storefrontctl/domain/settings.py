"""Typed settings models, one variant per module type.

Attribute names are snake_case in Python and camelCase on the wire
(``cta_text`` <-> ``ctaText``). Unknown keys survive a round trip so that
settings written by newer front ends are never silently dropped.

Each variant declares ``ENRICHED_FIELDS``: the reserved keys owned by the
data enricher. Those keys hold read-only projections of the store profile
and are never accepted from a user edit.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Literal, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefrontctl.domain.types import ModuleType

Alignment = Literal["left", "center", "right"]


class WireModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Enriched sub-objects (projections of the store profile)
# ---------------------------------------------------------------------------


class AddressSummary(WireModel):
    location_name: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None


class StoreContactInfo(WireModel):
    store_phone: str | None = None
    store_email: str | None = None
    business_address: AddressSummary | None = None


class BusinessHours(WireModel):
    day_of_week: int = Field(ge=0, le=6)
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False


class ContactInfo(WireModel):
    phone: str | None = None
    email: str | None = None
    store_name: str | None = None


class LogisticsInfo(WireModel):
    has_delivery: bool = False
    delivery_radius: float | None = None
    has_farm_pickup: bool = False
    has_business_address: bool = False


class CategorySummary(WireModel):
    category_id: int
    name: str
    description: str | None = None
    icon_url: str | None = None


class BusinessAddress(WireModel):
    address_type: str | None = None
    location_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None


# ---------------------------------------------------------------------------
# User-editable nested shapes
# ---------------------------------------------------------------------------


class FormField(WireModel):
    name: str
    label: str
    type: Literal["text", "email", "phone", "textarea", "select"] = "text"
    required: bool = False
    options: list[str] | None = None


class SocialPlatform(WireModel):
    name: Literal["facebook", "instagram", "twitter", "youtube", "tiktok", "linkedin"]
    url: str = ""
    enabled: bool = False


class CustomPolicy(WireModel):
    title: str
    content: str


# ---------------------------------------------------------------------------
# Settings base
# ---------------------------------------------------------------------------


class ModuleSettings(WireModel):
    """Base settings bag. Subclasses declare the typed shape per module type."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    ENRICHED_FIELDS: ClassVar[frozenset[str]] = frozenset()

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the persisted camelCase map.

        ``None`` is omitted only where it is also the field default; a field
        cleared over a non-``None`` default is written as ``null`` so it stays
        cleared through merges and decodes.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for name, info in type(self).model_fields.items():
            if getattr(self, name) is None and info.default is not None:
                data[info.alias or name] = None
        for key, value in (self.model_extra or {}).items():
            if value is None:
                data[key] = None
        return data

    @classmethod
    def wire_key(cls, key: str) -> str:
        """Translate a Python attribute name to its wire key (wire keys pass through)."""
        info = cls.model_fields.get(key)
        if info is not None and info.alias:
            return info.alias
        return key

    @classmethod
    def enriched_wire_keys(cls) -> frozenset[str]:
        return frozenset(cls.wire_key(name) for name in cls.ENRICHED_FIELDS)

    def merged(self, partial: Mapping[str, Any]) -> Self:
        """Return a re-validated copy with *partial* shallow-merged on top.

        Raises:
            pydantic.ValidationError: If the merged bag no longer matches
                the variant's schema.
        """
        data = self.to_wire()
        for key, value in partial.items():
            data[self.wire_key(key)] = value
        return type(self).model_validate(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Read a setting by Python name or wire key, including unknown extras."""
        for cls_key, info in type(self).model_fields.items():
            if key in (cls_key, info.alias):
                return getattr(self, cls_key)
        extras = self.model_extra or {}
        return extras.get(key, default)

    def missing(self, required: Iterable[str]) -> list[str]:
        """Return the required keys whose values are absent or blank."""
        absent: list[str] = []
        for key in required:
            value = self.get(key)
            if value is None:
                absent.append(key)
            elif isinstance(value, str) and not value.strip():
                absent.append(key)
            elif isinstance(value, (list, dict)) and not value:
                absent.append(key)
        return absent


# ---------------------------------------------------------------------------
# Concrete variants
# ---------------------------------------------------------------------------


class HeroBannerSettings(ModuleSettings):
    title: str = "Welcome to Our Farm"
    subtitle: str | None = "Fresh, organic produce delivered to your door"
    cta_text: str | None = "Shop Now"
    cta_link: str | None = None
    overlay_opacity: float = Field(default=0.4, ge=0.0, le=1.0)
    text_alignment: Alignment = "center"
    height: Literal["small", "medium", "large"] = "large"
    background_image: str | None = ""


class StoreIntroductionSettings(ModuleSettings):
    content: str = (
        "<p>Welcome to our family farm! "
        "We have been growing organic produce for over 20 years...</p>"
    )
    show_owner_photo: bool = True
    owner_photo_url: str | None = None
    background_color: str | None = None
    text_alignment: Alignment = "left"


class FeaturedProductsSettings(ModuleSettings):
    product_ids: list[int | str] = Field(default_factory=list)
    display_style: Literal["grid", "carousel", "list"] = "grid"
    products_per_row: Literal[2, 3, 4] = 3
    show_prices: bool = True
    show_quick_view: bool = False
    max_products: int = Field(default=6, ge=1)


class ProductCategoriesSettings(ModuleSettings):
    ENRICHED_FIELDS: ClassVar[frozenset[str]] = frozenset({"categories"})

    display_style: Literal["cards", "icons", "text"] = "cards"
    categories_per_row: Literal[2, 3, 4, 6] = 4
    show_product_counts: bool = True
    show_images: bool = True
    categories: list[CategorySummary] | None = None


class AllProductsSettings(ModuleSettings):
    display_style: Literal["grid", "list"] = "grid"
    products_per_page: Literal[12, 24, 48] = 24
    products_per_row: Literal[2, 3, 4] = 3
    enable_filtering: bool = True
    enable_sorting: bool = True
    show_search_bar: bool = True
    default_sort_by: Literal["name", "price-low", "price-high", "newest"] = "name"


class TestimonialsSettings(ModuleSettings):
    __test__ = False

    testimonial_ids: list[str] = Field(default_factory=list)
    display_style: Literal["carousel", "grid", "list"] = "carousel"
    show_ratings: bool = True
    show_customer_photos: bool = False
    max_testimonials: int = Field(default=5, ge=1)
    auto_rotate: bool = True
    rotation_interval: int = Field(default=5, ge=1)


class PolicySectionSettings(ModuleSettings):
    ENRICHED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"business_hours", "payment_methods", "contact_info", "logistics_info"}
    )

    show_shipping: bool = True
    show_returns: bool = True
    show_contact: bool = True
    custom_policies: list[CustomPolicy] = Field(default_factory=list)
    display_style: Literal["tabs", "accordion", "sections"] = "tabs"
    business_hours: list[BusinessHours] | None = None
    payment_methods: list[str] | None = None
    contact_info: ContactInfo | None = None
    logistics_info: LogisticsInfo | None = None


def _default_contact_fields() -> list[FormField]:
    return [
        FormField(name="name", label="Name", type="text", required=True),
        FormField(name="email", label="Email", type="email", required=True),
        FormField(name="message", label="Message", type="textarea", required=True),
    ]


class ContactFormSettings(ModuleSettings):
    ENRICHED_FIELDS: ClassVar[frozenset[str]] = frozenset({"store_contact_info"})

    title: str = "Contact Us"
    fields: list[FormField] = Field(default_factory=_default_contact_fields)
    submit_text: str = "Send Message"
    success_message: str = "Thank you for your message! We'll get back to you soon."
    email_notifications: bool = False
    notification_email: str | None = None
    store_contact_info: StoreContactInfo | None = None


class NewsletterSignupSettings(ModuleSettings):
    title: str = "Stay Updated"
    description: str = "Get notified about new products and seasonal updates"
    placeholder: str = "Enter your email"
    button_text: str = "Subscribe"
    position: Literal["inline", "popup", "sidebar"] = "inline"
    background_color: str | None = None
    text_color: str | None = None


def _default_platforms() -> list[SocialPlatform]:
    return [
        SocialPlatform(name="facebook"),
        SocialPlatform(name="instagram"),
        SocialPlatform(name="twitter"),
    ]


class SocialMediaSettings(ModuleSettings):
    platforms: list[SocialPlatform] = Field(default_factory=_default_platforms)
    display_style: Literal["icons", "buttons", "text"] = "icons"
    icon_size: Literal["small", "medium", "large"] = "medium"
    open_in_new_tab: bool = True


class SearchFilterSettings(ModuleSettings):
    layout: str = "industrial"
    search_placeholder: str = "Search products..."
    show_filters: bool = True
    show_sorting: bool = True
    persistent_search: bool = False


class BusinessAddressSettings(ModuleSettings):
    ENRICHED_FIELDS: ClassVar[frozenset[str]] = frozenset({"business_address"})

    show_location_name: bool = True
    show_contact_phone: bool = True
    show_contact_email: bool = True
    show_full_address: bool = True
    show_directions: bool = True
    display_style: str = "card"
    business_address: BusinessAddress | None = None


SETTINGS_MODELS: dict[ModuleType, type[ModuleSettings]] = {
    ModuleType.HERO_BANNER: HeroBannerSettings,
    ModuleType.STORE_INTRODUCTION: StoreIntroductionSettings,
    ModuleType.FEATURED_PRODUCTS: FeaturedProductsSettings,
    ModuleType.PRODUCT_CATEGORIES: ProductCategoriesSettings,
    ModuleType.ALL_PRODUCTS: AllProductsSettings,
    ModuleType.TESTIMONIALS: TestimonialsSettings,
    ModuleType.POLICY_SECTION: PolicySectionSettings,
    ModuleType.CONTACT_FORM: ContactFormSettings,
    ModuleType.NEWSLETTER_SIGNUP: NewsletterSignupSettings,
    ModuleType.SOCIAL_MEDIA: SocialMediaSettings,
    ModuleType.SEARCH_FILTER: SearchFilterSettings,
    ModuleType.BUSINESS_ADDRESS: BusinessAddressSettings,
}


def settings_model_for(module_type: str) -> type[ModuleSettings]:
    """Look up the settings variant for *module_type*.

    Raises:
        KeyError: If the type is not a known module type.
    """
    try:
        return SETTINGS_MODELS[ModuleType(module_type)]
    except ValueError as exc:
        msg = f"Unknown module type: {module_type!r}"
        raise KeyError(msg) from exc
