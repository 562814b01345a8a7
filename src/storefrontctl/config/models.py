"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, storefront.toml only contains
overrides. A working setup needs only ``[api] base_url``.
"""

from __future__ import annotations

from pydantic import BaseModel

from storefrontctl.domain.types import DeviceMode

# --- storefront.toml sections ---


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    base_url: str = "http://localhost:8080"
    timeout_seconds: float = 10.0
    token_env: str = "STOREFRONTCTL_TOKEN"


class StorefrontConfig(BaseModel):
    """[storefront] section."""

    model_config = {"frozen": True}

    default_theme: str = "clean-modern"
    header_style: str = "modern"
    footer_text: str = "Powered by HelloNeighbors"
    public_base_url: str | None = None


class PreviewConfig(BaseModel):
    """[preview] section."""

    model_config = {"frozen": True}

    device: DeviceMode = DeviceMode.DESKTOP
    live: bool = True


class DraftsConfig(BaseModel):
    """[drafts] section.

    A relative ``directory`` resolves against the project root.
    """

    model_config = {"frozen": True}

    directory: str = ".storefront/drafts"

