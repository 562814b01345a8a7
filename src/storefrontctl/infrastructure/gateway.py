"""PersistenceGateway — async REST client for the marketplace storefront API.

One call, one request: the gateway never retries. Failures surface as the
typed errors in :mod:`storefrontctl.infrastructure.errors`.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from storefrontctl.infrastructure.errors import (
    AuthorizationError,
    NotFoundError,
    StorefrontError,
    TransportError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

EDIT_COUNTER_HEADER = "X-Edit-Counter"
INVENTORY_LIMIT = 50


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail", "title", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    request = response.request
    return f"HTTP {response.status_code} from {request.method} {request.url.path}"


def _validation_issues(response: httpx.Response) -> list[str]:
    try:
        body = response.json()
    except ValueError:
        return []
    if not isinstance(body, dict):
        return []
    errors = body.get("errors")
    if isinstance(errors, dict):
        return [f"{field}: {msg}" for field, msgs in errors.items() for msg in (msgs or [])]
    if isinstance(errors, list):
        return [str(e) for e in errors]
    return []


def raise_for_status(response: httpx.Response) -> None:
    """Translate an error response into a typed StorefrontError."""
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response)
    if status in (401, 403):
        raise AuthorizationError(message, status_code=status)
    if status == 404:
        raise NotFoundError(message, status_code=status)
    if status in (400, 422):
        raise ValidationError(message, _validation_issues(response), status_code=status)
    if status >= 500:
        raise TransportError(message, status_code=status)
    raise StorefrontError(message, status_code=status)


def unwrap_items(payload: Any) -> list[dict[str, Any]]:
    """Accept either a bare list or a ``{"data": [...]}`` envelope."""
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]
    return []


class PersistenceGateway:
    """Thin async wrapper over the storefront endpoints.

    Usage::

        async with PersistenceGateway(base_url, token=token) as gateway:
            data = await gateway.fetch_customization(store_id)
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> PersistenceGateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- transport --------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        edit_counter: int | None = None,
    ) -> Any:
        headers: dict[str, str] = {}
        if edit_counter is not None:
            headers[EDIT_COUNTER_HEADER] = str(edit_counter)
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TimeoutException as exc:
            logger.warning("gateway.timeout", method=method, path=path)
            raise TransportError(f"Request timed out: {method} {path}") from exc
        except httpx.HTTPError as exc:
            logger.warning("gateway.transport_error", method=method, path=path, error=str(exc))
            raise TransportError(f"Network error: {exc}") from exc

        logger.debug("gateway.response", method=method, path=path, status=response.status_code)
        raise_for_status(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Malformed JSON from {method} {path}") from exc

    # -- storefront endpoints --------------------------------------------

    async def fetch_customization(self, store_id: int) -> dict[str, Any]:
        """Load the persisted document.

        Raises:
            NotFoundError: If the store has never saved a customization.
        """
        payload = await self._request("GET", f"/api/storefronts/{store_id}/customization")
        if not isinstance(payload, dict):
            raise NotFoundError(f"No customization stored for store {store_id}")
        return payload

    async def save_customization(
        self, store_id: int, document: dict[str, Any], *, edit_counter: int
    ) -> None:
        await self._request(
            "PUT",
            f"/api/storefronts/{store_id}/customization",
            json=document,
            edit_counter=edit_counter,
        )

    async def publish(
        self, store_id: int, document: dict[str, Any], *, edit_counter: int
    ) -> dict[str, Any]:
        payload = await self._request(
            "POST",
            f"/api/storefronts/{store_id}/publish",
            json={"storeId": store_id, "customization": document, "publishNow": True},
            edit_counter=edit_counter,
        )
        return payload if isinstance(payload, dict) else {}

    async def unpublish(self, store_id: int) -> None:
        await self._request("POST", f"/api/storefronts/{store_id}/unpublish")

    async def status(self, store_id: int) -> dict[str, Any]:
        payload = await self._request("GET", f"/api/storefronts/{store_id}/status")
        return payload if isinstance(payload, dict) else {}

    async def generate_slug(self, store_id: int, preferred_slug: str | None) -> dict[str, Any]:
        """Ask the server for a slug. Returns ``{"slug": str, "available": bool}``."""
        payload = await self._request(
            "POST",
            f"/api/storefronts/{store_id}/generate-slug",
            json={"preferredSlug": preferred_slug},
        )
        return payload if isinstance(payload, dict) else {}

    # -- collaborator endpoints ------------------------------------------

    async def fetch_store_profile(self, store_id: int) -> dict[str, Any]:
        payload = await self._request("GET", f"/api/stores/{store_id}/comprehensive")
        if not isinstance(payload, dict):
            raise NotFoundError(f"No store profile for store {store_id}")
        return payload

    async def fetch_inventory(
        self, store_id: int, *, limit: int = INVENTORY_LIMIT
    ) -> list[dict[str, Any]]:
        """Active inventory items, used only to preview featured products."""
        payload = await self._request(
            "GET",
            "/api/inventory",
            params={"storeId": store_id, "isActive": "true", "limit": limit},
        )
        return unwrap_items(payload)
