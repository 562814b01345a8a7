"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from storefrontctl.cli import cli
from tests.conftest import FakeStorefrontApi, init_draft, invoke


@pytest.mark.usefixtures("_isolated_project")
class TestInitOffline:
    def test_creates_default_draft(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = init_draft(cli_runner)
        assert data["source"] == "default"
        assert data["theme_id"] == "clean-modern"
        assert data["modules"] == 8
        assert data["draft_path"] == str(tmp_path / ".storefront" / "drafts" / "store-42.json")
        assert Path(data["draft_path"]).is_file()

    def test_theme_option(self, cli_runner: CliRunner) -> None:
        data = init_draft(cli_runner, "--theme", "rustic-artisanal")
        assert data["theme_id"] == "rustic-artisanal"

    def test_unknown_theme(self, cli_runner: CliRunner) -> None:
        result = invoke(cli_runner, "init", "--offline", "--theme", "neon-dreams")
        assert result.exit_code == 1
        error = json.loads(result.stderr)["error"]
        assert error["code"] == "NOT_FOUND"
        assert "clean-modern" in error["detail"]["known"]

    def test_default_theme_from_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "storefront.toml").write_text(
            '[storefront]\ndefault_theme = "minimalist-scandinavian"\n'
        )
        assert init_draft(cli_runner)["theme_id"] == "minimalist-scandinavian"

    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--store", "42", "init", "--offline"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "source: default" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestInitReplacingDraft:
    def test_clean_draft_is_replaced(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        assert init_draft(cli_runner, "--theme", "bold-vibrant")["theme_id"] == "bold-vibrant"

    def test_dirty_draft_refused(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        assert invoke(cli_runner, "modules", "add", "testimonials").exit_code == 0

        result = invoke(cli_runner, "init", "--offline")
        assert result.exit_code == 1
        error = json.loads(result.stderr)["error"]
        assert error["code"] == "INVALID_STATE"
        assert error["detail"]["edit_counter"] == 1

    def test_force_replaces_dirty_draft(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        invoke(cli_runner, "modules", "add", "testimonials")
        assert init_draft(cli_runner, "--force")["modules"] == 8


@pytest.mark.usefixtures("_isolated_project", "_offline_api")
class TestInitOnline:
    def test_never_saved_store(self, cli_runner: CliRunner, fake_api: FakeStorefrontApi) -> None:
        result = invoke(cli_runner, "init")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["source"] == "default"
        assert "policy-section-8" in data["enriched"]
        assert fake_api.endpoints() == ["GET customization", "GET comprehensive"]

    def test_loads_saved_customization(
        self, cli_runner: CliRunner, fake_api: FakeStorefrontApi
    ) -> None:
        init_draft(cli_runner)
        invoke(cli_runner, "modules", "add", "testimonials")
        assert invoke(cli_runner, "save").exit_code == 0

        result = invoke(cli_runner, "init")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["source"] == "remote"
        assert data["modules"] == 9

    def test_profile_failure_is_a_warning(
        self, cli_runner: CliRunner, fake_api: FakeStorefrontApi
    ) -> None:
        fake_api.fail("GET", "comprehensive", 503)
        result = invoke(cli_runner, "init")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["warnings"]

    def test_server_error(self, cli_runner: CliRunner, fake_api: FakeStorefrontApi) -> None:
        fake_api.fail("GET", "customization", 500, {"message": "database unavailable"})
        result = invoke(cli_runner, "init")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "TRANSPORT_ERROR"
