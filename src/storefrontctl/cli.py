"""Root CLI group for storefrontctl with global flags and command registration."""

from __future__ import annotations

import click

from storefrontctl import __version__
from storefrontctl.commands import register_commands
from storefrontctl.commands._context import AppContext
from storefrontctl.config.settings import StorefrontSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="storefrontctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with timing spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--store",
    "store_id",
    type=int,
    default=None,
    help="Store to edit (or set STOREFRONTCTL_STORE_ID).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    config_path: str | None,
    store_id: int | None,
) -> None:
    """storefrontctl — compose, preview, and publish marketplace storefronts."""
    ctx.ensure_object(dict)
    settings = StorefrontSettings.from_cli(
        config_path=config_path,
        store_id=store_id,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_interact=no_interact,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
