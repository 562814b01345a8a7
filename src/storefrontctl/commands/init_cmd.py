"""Command: start a local draft (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from storefrontctl.commands._base import StorefrontCommand
from storefrontctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from storefrontctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  storefrontctl --store 42 init
  storefrontctl --store 42 init --theme rustic-artisanal
  storefrontctl --store 42 init --offline
  storefrontctl --no-interact --store 42 init --force"""


@click.command("init", cls=StorefrontCommand, examples=_INIT_EXAMPLES, needs_store=True)
@click.option(
    "--theme",
    "theme_id",
    default=None,
    help="Theme for a storefront that has never been saved (default from config).",
)
@click.option("--offline", is_flag=True, help="Start from the default layout; no API calls.")
@click.option("--force", is_flag=True, help="Replace a local draft with unsaved changes.")
@click.pass_obj
def init_cmd(app: AppContext, theme_id: str | None, offline: bool, force: bool) -> None:
    """Load the store's storefront (or the default layout) into a local draft."""
    op = "load"
    if theme_id is not None and not app.themes.contains(theme_id):
        app.abort(
            ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"Unknown theme '{theme_id}'",
                detail={"known": [t.id for t in app.themes]},
            )
        )

    if app.drafts.exists(app.store_id):
        current = app.load_session(op)
        confirmed = force
        if current.dirty and not force and app.interactive:
            confirmed = click.confirm("The local draft has unsaved changes. Replace it?")
        if not current.confirm_discard(confirmed):
            app.abort(
                ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_STATE,
                    "The local draft has unsaved changes. Save it first, or pass --force.",
                    detail={"edit_counter": current.edit_counter},
                )
            )

    session = app.new_session(theme_id)
    if offline:
        result = ServiceResult(
            ok=True,
            op=op,
            data={
                "store_id": session.store_id,
                "source": "default",
                "theme_id": session.document.theme_id,
                "modules": len(session.document.modules),
                "enriched": [],
                "is_published": False,
            },
        )
    else:
        result = app.run(lambda gw: app.workflow(gw).load(session))

    if result.ok:
        path = app.save_draft(session)
        result = result.model_copy(update={"data": {**result.data, "draft_path": path}})
    app.emit(result)
