"""storefrontctl — storefront module composition and publishing engine."""

__version__ = "0.4.0"
