"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides the cached draft session, a gateway factory
for network commands, and centralized result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from functools import cached_property
from typing import TYPE_CHECKING, NoReturn, TypeVar

import click
from pydantic import ValidationError as PydanticValidationError

from storefrontctl.infrastructure.drafts import DraftStore
from storefrontctl.infrastructure.gateway import PersistenceGateway
from storefrontctl.output.formatters import OutputSettings, format_result
from storefrontctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from storefrontctl.config.settings import StorefrontSettings
    from storefrontctl.domain.registry import ModuleRegistry
    from storefrontctl.domain.themes import ThemeCatalog
    from storefrontctl.services.editor import EditorSession
    from storefrontctl.services.publish import PublishWorkflow


T = TypeVar("T")


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. Catalogs and the draft
    store are built lazily so ``--help`` and ``--version`` never read
    package data or the filesystem.
    """

    def __init__(self, settings: StorefrontSettings) -> None:
        self.settings = settings

        from storefrontctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            store_id=settings.store_id,
        )

        # Enable telemetry context var when verbose
        if settings.verbose:
            from storefrontctl.services.telemetry import enable_telemetry

            enable_telemetry()

    # -- catalogs ---------------------------------------------------------

    @cached_property
    def registry(self) -> ModuleRegistry:
        from storefrontctl.domain.registry import ModuleRegistry

        return ModuleRegistry.builtin()

    @cached_property
    def themes(self) -> ThemeCatalog:
        from storefrontctl.domain.themes import ThemeCatalog

        return ThemeCatalog.builtin()

    @cached_property
    def drafts(self) -> DraftStore:
        return DraftStore(self.settings.drafts_dir)

    @property
    def store_id(self) -> int:
        store_id = self.settings.store_id
        if store_id is None:
            from storefrontctl.commands._base import NO_STORE_MESSAGE

            raise click.UsageError(NO_STORE_MESSAGE)
        return store_id

    @property
    def interactive(self) -> bool:
        """Prompts need no --no-interact, no --json, and a TTY on stdin."""
        return (
            not self.settings.no_interact
            and not self.settings.json_output
            and sys.stdin.isatty()
        )

    # -- drafts -----------------------------------------------------------

    def new_session(self, theme_id: str | None = None) -> EditorSession:
        from storefrontctl.services.editor import EditorSession

        options = self.settings.storefront
        return EditorSession.create(
            self.store_id,
            registry=self.registry,
            themes=self.themes,
            theme_id=theme_id or options.default_theme,
            header_style=options.header_style,
            footer_text=options.footer_text,
        )

    def load_session(self, op: str) -> EditorSession:
        """Rebuild the cached draft for the selected store.

        Emits a failure (exit code 1) when no draft exists or it is unreadable.
        """
        from storefrontctl.services.editor import EditorSession

        path = self.drafts.path_for(self.store_id)
        try:
            record = self.drafts.load(self.store_id)
        except PydanticValidationError:
            self.abort(
                ServiceResult.failure(
                    op,
                    ErrorCode.VALIDATION_FAILED,
                    f"Draft file is unreadable: {path}",
                    detail={"path": str(path)},
                )
            )
        if record is None:
            self.abort(
                ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"No local draft for store {self.store_id}. "
                    "Run `storefrontctl init` first.",
                    detail={"store_id": self.store_id, "path": str(path)},
                )
            )
        session, warnings = EditorSession.from_draft(
            record, registry=self.registry, themes=self.themes
        )
        if not self.settings.json_output:
            for warning in warnings:
                click.echo(f"WARNING: {warning}", err=True)
        return session

    def save_draft(self, session: EditorSession) -> str:
        return str(self.drafts.save(session.store_id, session.to_draft()))

    # -- network ----------------------------------------------------------

    def gateway(self) -> PersistenceGateway:
        api = self.settings.api
        return PersistenceGateway(
            api.base_url,
            token=self.settings.api_token,
            timeout=api.timeout_seconds,
        )

    def run(self, action: Callable[[PersistenceGateway], Awaitable[T]]) -> T:
        """Run *action* against a fresh gateway on a fresh event loop."""

        async def _main() -> T:
            async with self.gateway() as gateway:
                return await action(gateway)

        return asyncio.run(_main())

    def workflow(self, gateway: PersistenceGateway) -> PublishWorkflow:
        from storefrontctl.services.publish import PublishWorkflow

        return PublishWorkflow(
            gateway,
            registry=self.registry,
            themes=self.themes,
            public_base_url=self.settings.storefront.public_base_url,
        )

    # -- output -----------------------------------------------------------

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def abort(self, result: ServiceResult) -> NoReturn:
        """Emit a failed result and exit with code 1."""
        self.emit(result)
        raise SystemExit(1)
