"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``STOREFRONTCTL_*`` prefix, nested sections via ``__``
  3. TOML file    — ``storefront.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`. The
TOML file is found by walking up from the working directory, the way git
finds .git/, unless ``--config`` or ``STOREFRONTCTL_CONFIG`` names one.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from storefrontctl.config.models import (
    ApiConfig,
    DraftsConfig,
    PreviewConfig,
    StorefrontConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``storefront.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


CONFIG_FILENAME = "storefront.toml"
CONFIG_ENV_VAR = "STOREFRONTCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest storefront.toml at or above *start* (default: cwd).

    ``STOREFRONTCTL_CONFIG`` wins when set; a path that does not exist
    means no config rather than falling back to the walk.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        return path if path.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class StorefrontSettings(BaseSettings):
    """Unified settings for the storefrontctl CLI.

    Stored on the AppContext at the CLI root level.

    Attributes:
        project_root: Directory holding ``storefront.toml`` (or CWD if no
            config was found). Relative draft directories resolve here.
        config_path: The TOML file actually read, if any.
        store_id: Store being edited; ``--store`` or ``STOREFRONTCTL_STORE_ID``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STOREFRONTCTL_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    store_id: int | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    api: ApiConfig = Field(default_factory=ApiConfig)
    storefront: StorefrontConfig = Field(default_factory=StorefrontConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    drafts: DraftsConfig = Field(default_factory=DraftsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> StorefrontSettings:
        """Construct settings from a CLI invocation.

        Flags given as None are dropped so they do not shadow env vars or
        the TOML file.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        overrides = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None

    @property
    def drafts_dir(self) -> Path:
        directory = Path(self.drafts.directory).expanduser()
        if not directory.is_absolute():
            directory = self.project_root / directory
        return directory

    @property
    def api_token(self) -> str | None:
        return os.environ.get(self.api.token_env) or None
