"""Tests for the modules command group."""

from __future__ import annotations

import json

import click
import pytest
from click.testing import CliRunner

from storefrontctl.cli import cli
from storefrontctl.commands.modules import parse_assignments
from tests.conftest import init_draft, invoke


class TestParseAssignments:
    def test_json_values(self) -> None:
        patch = parse_assignments(("maxProducts=8", "showPrices=false", 'title="Hi"'))
        assert patch == {"maxProducts": 8, "showPrices": False, "title": "Hi"}

    def test_plain_strings(self) -> None:
        assert parse_assignments(("title=Fresh eggs daily",)) == {"title": "Fresh eggs daily"}

    def test_splits_on_first_equals(self) -> None:
        assert parse_assignments(("buttonLink=/shop?x=1",)) == {"buttonLink": "/shop?x=1"}

    @pytest.mark.parametrize("pair", ["title", "=value"])
    def test_malformed(self, pair: str) -> None:
        with pytest.raises(click.BadParameter):
            parse_assignments((pair,))


@pytest.mark.usefixtures("_isolated_project")
class TestModulesCommands:
    def test_list(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "list")
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 8
        assert [m["order"] for m in data["items"]] == list(range(8))

    def test_list_available(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "list", "--available")
        assert json.loads(result.stdout)["op"] == "list_templates"

    def test_list_quiet(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = cli_runner.invoke(cli, ["-q", "--store", "42", "modules", "list"])
        assert result.exit_code == 0
        assert result.stdout.splitlines()[0] == "hero-banner-1"

    def test_add_persists(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "add", "testimonials")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["id"] == "testimonials-9"

        listed = json.loads(invoke(cli_runner, "modules", "list").stdout)["data"]
        assert listed["count"] == 9
        assert listed["items"][-1]["id"] == "testimonials-9"

    def test_add_unknown_type(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "add", "carousel")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NOT_FOUND"

    def test_remove(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "remove", "search-filter-4")
        assert result.exit_code == 0
        listed = json.loads(invoke(cli_runner, "modules", "list").stdout)["data"]
        assert "search-filter-4" not in [m["id"] for m in listed["items"]]
        assert [m["order"] for m in listed["items"]] == list(range(7))

    def test_remove_unknown(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "remove", "nope-99")
        assert result.exit_code == 1
        assert "No module 'nope-99'" in result.stderr

    def test_move(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "move", "contact-form-7", "UP")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["order"] == 5

    def test_move_bad_direction(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "move", "contact-form-7", "sideways")
        assert result.exit_code == 2

    def test_toggle(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "toggle", "search-filter-4")
        assert json.loads(result.stdout)["data"]["enabled"] is False

    def test_set_settings(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        args = ("featured-products-6", "maxProducts=8", "productsPerRow=4")
        result = invoke(cli_runner, "modules", "set", *args)
        assert result.exit_code == 0, result.output
        settings = json.loads(result.stdout)["data"]["settings"]
        assert settings["maxProducts"] == 8
        assert settings["productsPerRow"] == 4

    def test_set_title_and_settings(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        args = ("hero-banner-1", "--title", "Welcome", "overlayOpacity=0.6")
        result = invoke(cli_runner, "modules", "set", *args)
        assert result.exit_code == 0, result.output
        listed = json.loads(invoke(cli_runner, "modules", "list").stdout)["data"]
        assert listed["items"][0]["title"] == "Welcome"

    def test_set_invalid_value(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "set", "featured-products-6", "productsPerRow=7")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "VALIDATION_FAILED"

    def test_set_nothing(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        result = invoke(cli_runner, "modules", "set", "hero-banner-1")
        assert result.exit_code == 2
        assert "Nothing to change" in result.stderr

    def test_edits_mark_draft_dirty(self, cli_runner: CliRunner) -> None:
        init_draft(cli_runner)
        invoke(cli_runner, "modules", "toggle", "search-filter-4")
        invoke(cli_runner, "modules", "toggle", "search-filter-4")
        result = invoke(cli_runner, "init", "--offline")
        error = json.loads(result.stderr)["error"]
        assert error["detail"]["edit_counter"] == 2


@pytest.mark.usefixtures("_isolated_project")
class TestStoreAndDraftRequired:
    def test_no_store_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["modules", "list"])
        assert result.exit_code == 2
        assert "No store selected" in result.stderr

    def test_store_from_env(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        init_draft(cli_runner)
        monkeypatch.setenv("STOREFRONTCTL_STORE_ID", "42")
        result = cli_runner.invoke(cli, ["--json", "modules", "list"])
        assert result.exit_code == 0

    def test_missing_draft(self, cli_runner: CliRunner) -> None:
        result = invoke(cli_runner, "modules", "list")
        assert result.exit_code == 1
        error = json.loads(result.stderr)["error"]
        assert error["code"] == "NOT_FOUND"
        assert "storefrontctl init" in error["message"]

    def test_unreadable_draft(self, cli_runner: CliRunner) -> None:
        data = init_draft(cli_runner)
        with open(data["draft_path"], "w", encoding="utf-8") as fh:
            fh.write("{oops")
        result = invoke(cli_runner, "modules", "list")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "VALIDATION_FAILED"
