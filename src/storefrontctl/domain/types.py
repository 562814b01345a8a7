"""Module, theme, and preview classification enums."""

from __future__ import annotations

from enum import StrEnum


class ModuleType(StrEnum):
    """Closed set of storefront module types."""

    HERO_BANNER = "hero-banner"
    STORE_INTRODUCTION = "store-introduction"
    FEATURED_PRODUCTS = "featured-products"
    PRODUCT_CATEGORIES = "product-categories"
    ALL_PRODUCTS = "all-products"
    TESTIMONIALS = "testimonials"
    POLICY_SECTION = "policy-section"
    CONTACT_FORM = "contact-form"
    NEWSLETTER_SIGNUP = "newsletter-signup"
    SOCIAL_MEDIA = "social-media"
    SEARCH_FILTER = "search-filter"
    BUSINESS_ADDRESS = "business-address"


class ModuleCategory(StrEnum):
    """Grouping used by the module picker."""

    CONTENT = "content"
    PRODUCTS = "products"
    ENGAGEMENT = "engagement"
    INFORMATION = "information"


class ThemeCategory(StrEnum):
    """Theme families shipped in the catalog."""

    MODERN = "modern"
    RUSTIC = "rustic"
    VIBRANT = "vibrant"
    INDUSTRIAL = "industrial"
    GALLERY = "gallery"
    MINIMALIST = "minimalist"
    BOLD = "bold"
    LUXE = "luxe"
    VINTAGE = "vintage"


class Direction(StrEnum):
    """Reorder direction for a module move."""

    UP = "up"
    DOWN = "down"


class DeviceMode(StrEnum):
    """Preview viewport."""

    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class Region(StrEnum):
    """Page region a module renders into."""

    MAIN = "main"
    FOOTER = "footer"
