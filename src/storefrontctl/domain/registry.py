"""ModuleRegistry — the immutable catalog of module templates.

Built once (``ModuleRegistry.builtin()``) and handed to whatever needs it.
Tests construct their own registries from a handful of templates.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel

from storefrontctl.domain.settings import (
    AllProductsSettings,
    BusinessAddressSettings,
    ContactFormSettings,
    FeaturedProductsSettings,
    HeroBannerSettings,
    ModuleSettings,
    NewsletterSignupSettings,
    PolicySectionSettings,
    ProductCategoriesSettings,
    SearchFilterSettings,
    SocialMediaSettings,
    StoreIntroductionSettings,
    TestimonialsSettings,
)
from storefrontctl.domain.types import ModuleCategory, ModuleType


class ModuleTemplate(BaseModel):
    """Blueprint for a module type: display metadata plus default settings."""

    model_config = {"frozen": True}

    type: ModuleType
    name: str
    description: str
    icon: str
    category: ModuleCategory
    default_settings: ModuleSettings
    required_settings: tuple[str, ...] = ()
    premium: bool = False

    def new_settings(self) -> ModuleSettings:
        """Return an independent copy of the default settings."""
        return self.default_settings.model_copy(deep=True)


class ModuleRegistry:
    """Lookup of module templates keyed by type."""

    def __init__(self, templates: Iterable[ModuleTemplate]) -> None:
        self._templates: dict[ModuleType, ModuleTemplate] = {t.type: t for t in templates}

    @classmethod
    def builtin(cls) -> ModuleRegistry:
        return cls(BUILTIN_TEMPLATES)

    def template_for(self, module_type: str) -> ModuleTemplate:
        """Return the template for *module_type*.

        Raises:
            KeyError: If the type is unknown to this registry.
        """
        try:
            return self._templates[ModuleType(module_type)]
        except (ValueError, KeyError) as exc:
            msg = f"No module template for type {module_type!r}"
            raise KeyError(msg) from exc

    def contains(self, module_type: str) -> bool:
        try:
            return ModuleType(module_type) in self._templates
        except ValueError:
            return False

    def templates(self, *, include_premium: bool = True) -> list[ModuleTemplate]:
        return [t for t in self._templates.values() if include_premium or not t.premium]

    def by_category(self, category: ModuleCategory) -> list[ModuleTemplate]:
        return [t for t in self._templates.values() if t.category == category]

    def __iter__(self) -> Iterator[ModuleTemplate]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


BUILTIN_TEMPLATES: tuple[ModuleTemplate, ...] = (
    ModuleTemplate(
        type=ModuleType.HERO_BANNER,
        name="Hero Banner",
        description="Large banner with image, title, and call-to-action",
        icon="Image",
        category=ModuleCategory.CONTENT,
        default_settings=HeroBannerSettings(),
        required_settings=("title",),
    ),
    ModuleTemplate(
        type=ModuleType.STORE_INTRODUCTION,
        name="Store Introduction",
        description="Tell your story and share your farming practices",
        icon="ContentCopy",
        category=ModuleCategory.CONTENT,
        default_settings=StoreIntroductionSettings(),
        required_settings=("content",),
    ),
    ModuleTemplate(
        type=ModuleType.FEATURED_PRODUCTS,
        name="Featured Products",
        description="Showcase your best products",
        icon="Star",
        category=ModuleCategory.PRODUCTS,
        default_settings=FeaturedProductsSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.PRODUCT_CATEGORIES,
        name="Product Categories",
        description="Display your product categories for easy navigation",
        icon="Category",
        category=ModuleCategory.PRODUCTS,
        default_settings=ProductCategoriesSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.ALL_PRODUCTS,
        name="All Products",
        description="Complete product catalog with filtering and sorting",
        icon="ViewModule",
        category=ModuleCategory.PRODUCTS,
        default_settings=AllProductsSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.TESTIMONIALS,
        name="Customer Testimonials",
        description="Show customer reviews and testimonials",
        icon="Star",
        category=ModuleCategory.ENGAGEMENT,
        default_settings=TestimonialsSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.CONTACT_FORM,
        name="Contact Form",
        description="Allow customers to contact you directly",
        icon="ContactMail",
        category=ModuleCategory.ENGAGEMENT,
        default_settings=ContactFormSettings(),
        required_settings=("title", "fields"),
    ),
    ModuleTemplate(
        type=ModuleType.NEWSLETTER_SIGNUP,
        name="Newsletter Signup",
        description="Build your customer email list",
        icon="Email",
        category=ModuleCategory.ENGAGEMENT,
        default_settings=NewsletterSignupSettings(),
        required_settings=("title",),
    ),
    ModuleTemplate(
        type=ModuleType.SOCIAL_MEDIA,
        name="Social Media Links",
        description="Connect your social media accounts",
        icon="Share",
        category=ModuleCategory.ENGAGEMENT,
        default_settings=SocialMediaSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.POLICY_SECTION,
        name="Policies & Information",
        description="Display shipping, returns, and other policies",
        icon="Settings",
        category=ModuleCategory.INFORMATION,
        default_settings=PolicySectionSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.SEARCH_FILTER,
        name="Search & Filter",
        description="Product search and filtering with style-aware design",
        icon="Search",
        category=ModuleCategory.PRODUCTS,
        default_settings=SearchFilterSettings(),
    ),
    ModuleTemplate(
        type=ModuleType.BUSINESS_ADDRESS,
        name="Business Address",
        description="Display store location and contact information",
        icon="LocationOn",
        category=ModuleCategory.INFORMATION,
        default_settings=BusinessAddressSettings(),
    ),
)

# First-time layout, in display order.
DEFAULT_LAYOUT: tuple[ModuleType, ...] = (
    ModuleType.HERO_BANNER,
    ModuleType.STORE_INTRODUCTION,
    ModuleType.BUSINESS_ADDRESS,
    ModuleType.SEARCH_FILTER,
    ModuleType.PRODUCT_CATEGORIES,
    ModuleType.FEATURED_PRODUCTS,
    ModuleType.CONTACT_FORM,
    ModuleType.POLICY_SECTION,
)
