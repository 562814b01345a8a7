"""Command: throw away the local draft."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from storefrontctl.commands._base import StorefrontCommand
from storefrontctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from storefrontctl.commands._context import AppContext


@click.command(
    cls=StorefrontCommand,
    needs_store=True,
    examples="""\
  storefrontctl --store 42 discard
  storefrontctl --no-interact --store 42 discard --yes""",
)
@click.option("--yes", "-y", "confirmed", is_flag=True, help="Discard even with unsaved edits.")
@click.pass_obj
def discard(app: AppContext, confirmed: bool) -> None:
    """Delete the local draft. Unsaved edits need confirmation."""
    op = "discard"
    store_id = app.store_id
    if not app.drafts.exists(store_id):
        app.emit(ServiceResult(ok=True, op=op, data={"store_id": store_id, "discarded": False}))
        return

    session = app.load_session(op)
    if session.dirty and not confirmed and app.interactive:
        confirmed = click.confirm(f"Discard {session.edit_counter} unsaved edit(s)?")
    if not session.confirm_discard(confirmed):
        app.abort(
            ServiceResult.failure(
                op,
                ErrorCode.INVALID_STATE,
                "The draft has unsaved changes; pass --yes to discard them.",
                detail={"edit_counter": session.edit_counter},
            )
        )

    app.drafts.delete(store_id)
    app.emit(
        ServiceResult(
            ok=True,
            op=op,
            data={"store_id": store_id, "discarded": True, "was_dirty": session.dirty},
        )
    )
