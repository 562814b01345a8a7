"""ModuleConfig — the tagged union of module instances.

Each module type is its own pydantic class carrying the settings variant
for that type, discriminated by the ``type`` field. Consumers match on the
class (or on ``settings``) instead of probing an untyped map.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

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
from storefrontctl.domain.types import ModuleType


class BaseModule(BaseModel):
    """Fields shared by every module instance."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    type: str
    title: str
    description: str = ""
    icon: str = ""
    enabled: bool = True
    order: int = Field(default=0, ge=0)
    content: dict[str, Any] = Field(default_factory=dict)
    settings: ModuleSettings

    @property
    def module_type(self) -> ModuleType:
        return ModuleType(self.type)


class HeroBannerModule(BaseModule):
    type: Literal["hero-banner"] = "hero-banner"
    settings: HeroBannerSettings = Field(default_factory=HeroBannerSettings)


class StoreIntroductionModule(BaseModule):
    type: Literal["store-introduction"] = "store-introduction"
    settings: StoreIntroductionSettings = Field(default_factory=StoreIntroductionSettings)


class FeaturedProductsModule(BaseModule):
    type: Literal["featured-products"] = "featured-products"
    settings: FeaturedProductsSettings = Field(default_factory=FeaturedProductsSettings)


class ProductCategoriesModule(BaseModule):
    type: Literal["product-categories"] = "product-categories"
    settings: ProductCategoriesSettings = Field(default_factory=ProductCategoriesSettings)


class AllProductsModule(BaseModule):
    type: Literal["all-products"] = "all-products"
    settings: AllProductsSettings = Field(default_factory=AllProductsSettings)


class TestimonialsModule(BaseModule):
    __test__ = False

    type: Literal["testimonials"] = "testimonials"
    settings: TestimonialsSettings = Field(default_factory=TestimonialsSettings)


class PolicySectionModule(BaseModule):
    type: Literal["policy-section"] = "policy-section"
    settings: PolicySectionSettings = Field(default_factory=PolicySectionSettings)


class ContactFormModule(BaseModule):
    type: Literal["contact-form"] = "contact-form"
    settings: ContactFormSettings = Field(default_factory=ContactFormSettings)


class NewsletterSignupModule(BaseModule):
    type: Literal["newsletter-signup"] = "newsletter-signup"
    settings: NewsletterSignupSettings = Field(default_factory=NewsletterSignupSettings)


class SocialMediaModule(BaseModule):
    type: Literal["social-media"] = "social-media"
    settings: SocialMediaSettings = Field(default_factory=SocialMediaSettings)


class SearchFilterModule(BaseModule):
    type: Literal["search-filter"] = "search-filter"
    settings: SearchFilterSettings = Field(default_factory=SearchFilterSettings)


class BusinessAddressModule(BaseModule):
    type: Literal["business-address"] = "business-address"
    settings: BusinessAddressSettings = Field(default_factory=BusinessAddressSettings)


ModuleConfig = Annotated[
    HeroBannerModule
    | StoreIntroductionModule
    | FeaturedProductsModule
    | ProductCategoriesModule
    | AllProductsModule
    | TestimonialsModule
    | PolicySectionModule
    | ContactFormModule
    | NewsletterSignupModule
    | SocialMediaModule
    | SearchFilterModule
    | BusinessAddressModule,
    Field(discriminator="type"),
]

MODULE_ADAPTER: TypeAdapter[ModuleConfig] = TypeAdapter(ModuleConfig)

MODULE_CLASSES: dict[ModuleType, type[BaseModule]] = {
    ModuleType.HERO_BANNER: HeroBannerModule,
    ModuleType.STORE_INTRODUCTION: StoreIntroductionModule,
    ModuleType.FEATURED_PRODUCTS: FeaturedProductsModule,
    ModuleType.PRODUCT_CATEGORIES: ProductCategoriesModule,
    ModuleType.ALL_PRODUCTS: AllProductsModule,
    ModuleType.TESTIMONIALS: TestimonialsModule,
    ModuleType.POLICY_SECTION: PolicySectionModule,
    ModuleType.CONTACT_FORM: ContactFormModule,
    ModuleType.NEWSLETTER_SIGNUP: NewsletterSignupModule,
    ModuleType.SOCIAL_MEDIA: SocialMediaModule,
    ModuleType.SEARCH_FILTER: SearchFilterModule,
    ModuleType.BUSINESS_ADDRESS: BusinessAddressModule,
}


def parse_module(data: dict[str, Any]) -> BaseModule:
    """Validate a Python-keyed mapping into the variant named by ``data["type"]``.

    Raises:
        pydantic.ValidationError: On an unknown type or malformed settings.
    """
    return MODULE_ADAPTER.validate_python(data)
