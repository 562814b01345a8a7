"""Commands: save, publish, unpublish, refresh, and status (talk to the API)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from storefrontctl.commands._base import StorefrontCommand

if TYPE_CHECKING:
    from storefrontctl.commands._context import AppContext


@click.command(
    cls=StorefrontCommand,
    needs_store=True,
    examples="""\
  storefrontctl --store 42 save
  storefrontctl --json --store 42 save""",
)
@click.pass_obj
def save(app: AppContext) -> None:
    """Send the local draft to the server without publishing it."""
    session = app.load_session("save")
    result = app.run(lambda gw: app.workflow(gw).save(session))
    app.save_draft(session)
    app.emit(result)


@click.command(
    cls=StorefrontCommand,
    needs_store=True,
    examples="""\
  storefrontctl --store 42 publish
  storefrontctl -q --store 42 publish        # prints only the public URL""",
)
@click.pass_obj
def publish(app: AppContext) -> None:
    """Validate, save, and publish the draft; prints the public URL.

    Nothing is sent when validation fails. A failure at any later step
    leaves the live storefront as it was and keeps the local draft.
    """
    session = app.load_session("publish")
    result = app.run(lambda gw: app.workflow(gw).publish(session))
    app.save_draft(session)
    app.emit(result)


@click.command(
    cls=StorefrontCommand,
    needs_store=True,
    examples="""\
  storefrontctl --store 42 unpublish""",
)
@click.pass_obj
def unpublish(app: AppContext) -> None:
    """Take the storefront offline. The draft is kept."""
    session = app.load_session("unpublish")
    result = app.run(lambda gw: app.workflow(gw).unpublish(session))
    app.save_draft(session)
    app.emit(result)


@click.command(
    cls=StorefrontCommand,
    needs_store=True,
    examples="""\
  storefrontctl --store 42 refresh""",
)
@click.pass_obj
def refresh(app: AppContext) -> None:
    """Re-pull store data (hours, address, payment methods) into the draft."""
    session = app.load_session("refresh")
    result = app.run(lambda gw: app.workflow(gw).refresh(session))
    app.save_draft(session)
    app.emit(result)


@click.command(
    cls=StorefrontCommand,
    needs_store=True,
    examples="""\
  storefrontctl --store 42 status
  storefrontctl --json --store 42 status""",
)
@click.pass_obj
def status(app: AppContext) -> None:
    """Show the server's publish status and whether the draft has unsaved edits."""
    store_id = app.store_id
    result = app.run(lambda gw: app.workflow(gw).status(store_id))
    if result.ok and app.drafts.exists(store_id):
        session = app.load_session("status")
        result = result.model_copy(
            update={"data": {**result.data, "local_dirty": session.dirty}}
        )
    app.emit(result)
