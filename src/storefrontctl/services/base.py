"""BaseService — shared foundation for services that talk to the API.

Every service receives a :class:`PersistenceGateway` at construction time
and translates gateway errors into failed ServiceResults at its boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from storefrontctl.infrastructure.errors import (
    AuthorizationError,
    StorefrontError,
    ValidationError,
)
from storefrontctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from storefrontctl.infrastructure.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = (
    "Not authorized for this store. Your session may have expired; "
    "refresh the API token and try again."
)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class StatusService(BaseService):
            async def status(self, store_id: int) -> ServiceResult:
                try:
                    payload = await self._gateway.status(store_id)
                except StorefrontError as exc:
                    return self._error_result("status", exc)
                ...
    """

    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    @staticmethod
    def _error_result(
        op: str,
        exc: StorefrontError,
        *,
        warnings: list[str] | None = None,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Translate a gateway error into a failed ServiceResult."""
        merged: dict[str, Any] = {**exc.detail, **(detail or {})}
        if exc.status_code is not None:
            merged["status_code"] = exc.status_code
        message = exc.message
        if isinstance(exc, AuthorizationError):
            message = UNAUTHORIZED_MESSAGE
        elif isinstance(exc, ValidationError):
            merged["issues"] = exc.issues
        code = exc.code if exc.code in ErrorCode.__members__ else ErrorCode.TRANSPORT_ERROR
        logger.info("%s failed: %s (%s)", op, exc.message, code)
        return ServiceResult.failure(op, code, message, detail=merged, warnings=warnings)
