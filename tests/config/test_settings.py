"""Tests for StorefrontSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from storefrontctl.config.settings import StorefrontSettings
from storefrontctl.domain.types import DeviceMode

pytestmark = pytest.mark.usefixtures("_isolated_project")


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.store_id is None
        assert settings.json_output is False
        assert settings.api.base_url == "http://localhost:8080"
        assert settings.storefront.default_theme == "clean-modern"
        assert settings.preview.device == DeviceMode.DESKTOP

    def test_frozen(self, tmp_path: Path) -> None:
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_root_defaults_to_cwd(self, tmp_path: Path) -> None:
        settings = StorefrontSettings.from_cli()
        assert settings.project_root == Path.cwd()


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "storefront.toml").write_text(
            '[api]\nbase_url = "https://api.market.example"\n'
            '[storefront]\ndefault_theme = "rustic-artisanal"\n'
        )
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.api.base_url == "https://api.market.example"
        assert settings.api.timeout_seconds == 10.0  # default preserved
        assert settings.storefront.default_theme == "rustic-artisanal"

    def test_walk_up_sets_project_root(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        toml = tmp_path / "storefront.toml"
        toml.write_text("store_id = 7\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = StorefrontSettings.from_cli()
        assert settings.config_path == toml
        assert settings.project_root == tmp_path
        assert settings.store_id == 7

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[preview]\ndevice = "mobile"\n')
        settings = StorefrontSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.config_path == custom
        assert settings.preview.device == DeviceMode.MOBILE

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "storefront.toml").write_text("[api\nbase_url = \n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            StorefrontSettings.from_cli(project_root=tmp_path)


class TestEnvAndFlags:
    def test_env_prefix(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFRONTCTL_STORE_ID", "99")
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.store_id == 99

    def test_nested_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "storefront.toml").write_text('[api]\nbase_url = "http://from-toml"\n')
        monkeypatch.setenv("STOREFRONTCTL_API__BASE_URL", "http://from-env")
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.api.base_url == "http://from-env"

    def test_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFRONTCTL_STORE_ID", "99")
        settings = StorefrontSettings.from_cli(project_root=tmp_path, store_id=42, quiet=True)
        assert settings.store_id == 42
        assert settings.quiet is True

    def test_none_flags_dropped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFRONTCTL_STORE_ID", "99")
        settings = StorefrontSettings.from_cli(project_root=tmp_path, store_id=None)
        assert settings.store_id == 99


class TestDerived:
    def test_relative_drafts_dir(self, tmp_path: Path) -> None:
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.drafts_dir == tmp_path / ".storefront" / "drafts"

    def test_absolute_drafts_dir(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere"
        (tmp_path / "storefront.toml").write_text(f'[drafts]\ndirectory = "{target.as_posix()}"\n')
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.drafts_dir == target

    def test_api_token(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.api_token is None
        monkeypatch.setenv("STOREFRONTCTL_TOKEN", "abc")
        assert settings.api_token == "abc"

    def test_custom_token_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "storefront.toml").write_text('[api]\ntoken_env = "MARKET_TOKEN"\n')
        monkeypatch.setenv("MARKET_TOKEN", "xyz")
        settings = StorefrontSettings.from_cli(project_root=tmp_path)
        assert settings.api_token == "xyz"
