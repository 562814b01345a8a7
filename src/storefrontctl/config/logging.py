"""structlog configuration for storefrontctl.

Every record, ours or a library's, goes through one stdlib handler on
stderr so stdout stays clean for command output. Two renderers:

- Human (default): colored console lines
- JSON (--log-json): one object per line, for piping into log tooling

The store being edited is bound into the context so each line says which
storefront it concerns, and API credentials are masked before rendering.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

REDACTED = "***"
_SECRET_KEYS = frozenset({"token", "api_token", "authorization", "password"})
_BEARER = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential-looking keys and bearer tokens inside string values."""
    for key, value in list(event_dict.items()):
        if key.lower() in _SECRET_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _BEARER.sub(rf"\g<1>{REDACTED}", value)
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    store_id: int | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output for storefrontctl. When False,
            only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        store_id: Bound as ``store_id`` on every record when given.
    """
    app_level = logging.DEBUG if verbose else logging.WARNING

    structlog.contextvars.clear_contextvars()
    if store_id is not None:
        structlog.contextvars.bind_contextvars(store_id=store_id)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("storefrontctl").setLevel(app_level)
    # httpx logs every request at INFO
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
