"""Typed errors raised by the REST gateway.

Each error carries a stable ``code`` matching the ServiceError codes the
publish workflow reports, so the service boundary can translate without a
lookup table.
"""

from __future__ import annotations

from typing import Any


class StorefrontError(Exception):
    """Base typed error for storefront operations."""

    code = "STOREFRONT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = dict(detail or {})


class ValidationError(StorefrontError):
    """The document failed pre-publish validation (or the API rejected it)."""

    code = "VALIDATION_FAILED"

    def __init__(self, message: str, issues: list[str], **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.issues = list(issues)


class TransportError(StorefrontError):
    """Network failure, timeout, or a 5xx response."""

    code = "TRANSPORT_ERROR"


class AuthorizationError(StorefrontError):
    """The bearer token was missing, expired, or lacks access (401/403)."""

    code = "UNAUTHORIZED"


class NotFoundError(StorefrontError):
    code = "NOT_FOUND"


class SlugUnavailableError(StorefrontError):
    """The preferred slug, and any server suggestion, is taken."""

    code = "SLUG_UNAVAILABLE"
