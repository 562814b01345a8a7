"""Shared pytest fixtures and test helpers for storefrontctl tests."""

from __future__ import annotations

import copy
import functools
import json
import logging
import re
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from storefrontctl.domain.profile import StoreProfile
from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.themes import ThemeCatalog
from storefrontctl.infrastructure.gateway import PersistenceGateway
from storefrontctl.services.editor import EditorSession
from storefrontctl.services.telemetry import disable_telemetry

STORE_ID = 42
BASE_URL = "http://storefront.test"

PROFILE: dict[str, Any] = {
    "storeId": STORE_ID,
    "storeName": "Green Acres Farm & Dairy",
    "contactPhone": "555-0100",
    "contactEmail": "hello@greenacres.example",
    "deliveryRadiusMi": 10.0,
    "addresses": [
        {
            "addressType": "business_address",
            "locationName": "Farm Store",
            "contactPhone": "555-0101",
            "streetAddress": "1 Orchard Rd",
            "city": "Hood River",
            "state": "OR",
            "zipCode": "97031",
            "isPrimary": True,
        },
        {
            "addressType": "farm_location",
            "locationName": "Pickup Barn",
            "city": "Hood River",
            "state": "OR",
        },
    ],
    "openHours": [
        *(
            {"dayOfWeek": day, "openTime": "08:00", "closeTime": "18:00", "isClosed": False}
            for day in range(1, 6)
        ),
        {"dayOfWeek": 6, "openTime": None, "closeTime": None, "isClosed": True},
    ],
    "paymentMethods": [
        {"methodId": 1, "paymentMethod": {"methodName": "Cash"}},
        {"methodId": 2, "paymentMethod": {"methodName": "Card"}},
    ],
    "categories": [
        {"categoryId": 1, "name": "Eggs"},
        {"categoryId": 2, "name": "Dairy", "description": "Milk and cheese"},
    ],
}

INVENTORY: list[dict[str, Any]] = [
    {"productId": 101, "name": "Brown Eggs (dozen)", "price": 6.0},
    {"productId": 102, "name": "Raw Milk (gallon)", "price": 9.5},
    {"productId": 103, "name": "Chevre", "price": 8.0},
]

_STOREFRONT_PATH = re.compile(r"^/api/storefronts/(\d+)/([\w-]+)$")
_PROFILE_PATH = re.compile(r"^/api/stores/(\d+)/comprehensive$")


class FakeStorefrontApi:
    """In-memory storefront API served through ``httpx.MockTransport``.

    Tests tweak the public attributes, then inspect ``requests``.
    ``failures`` maps ``(method, endpoint)`` to a canned error response,
    where *endpoint* is the last path segment (``"customization"``,
    ``"publish"``, ``"comprehensive"``, ...).
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.customization: dict[str, Any] | None = None
        self.profile: dict[str, Any] | None = copy.deepcopy(PROFILE)
        self.inventory: list[dict[str, Any]] = copy.deepcopy(INVENTORY)
        self.slug = "green-acres-farm-dairy"
        self.slug_available = True
        self.publish_response: dict[str, Any] = {
            "slug": "green-acres-farm-dairy",
            "publicUrl": "https://market.example/store/green-acres-farm-dairy",
            "publishedAt": "2026-05-01T12:00:00Z",
        }
        self.status_payload: dict[str, Any] = {
            "status": "published",
            "isPublished": True,
            "publicUrl": "https://market.example/store/green-acres-farm-dairy",
            "slug": "green-acres-farm-dairy",
            "publishedAt": "2026-05-01T12:00:00Z",
            "lastModified": "2026-05-01T11:59:00Z",
        }
        self.failures: dict[tuple[str, str], tuple[int, Any]] = {}
        self.before_save: Callable[[], None] | None = None

    # -- test helpers -----------------------------------------------------

    def fail(self, method: str, endpoint: str, status: int, body: Any = None) -> None:
        self.failures[(method, endpoint)] = (status, body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, endpoint: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path.rsplit("/", 1)[-1] == endpoint
        ]

    def endpoints(self) -> list[str]:
        return [f"{r.method} {r.url.path.rsplit('/', 1)[-1]}" for r in self.requests]

    # -- routing ----------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        endpoint = path.rsplit("/", 1)[-1]
        failure = self.failures.get((request.method, endpoint))
        if failure is not None:
            status, body = failure
            return httpx.Response(status, json=body if body is not None else {})

        if _PROFILE_PATH.match(path):
            if self.profile is None:
                return httpx.Response(404, json={"message": "Store not found"})
            return httpx.Response(200, json=self.profile)

        if path == "/api/inventory":
            envelope = {"data": self.inventory, "total": len(self.inventory)}
            return httpx.Response(200, json=envelope)

        route = _STOREFRONT_PATH.match(path)
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {path}"})
        body = json.loads(request.content) if request.content else None

        match (request.method, route.group(2)):
            case ("GET", "customization"):
                if self.customization is None:
                    return httpx.Response(404, json={"message": "No customization"})
                return httpx.Response(200, json=self.customization)
            case ("PUT", "customization"):
                if self.before_save is not None:
                    self.before_save()
                self.customization = body
                return httpx.Response(204)
            case ("POST", "generate-slug"):
                answer = {"slug": self.slug, "available": self.slug_available}
                return httpx.Response(200, json=answer)
            case ("POST", "publish"):
                self.customization = body["customization"]
                return httpx.Response(200, json=self.publish_response)
            case ("POST", "unpublish"):
                return httpx.Response(204)
            case ("GET", "status"):
                return httpx.Response(200, json=self.status_payload)
        return httpx.Response(405, json={"message": "Method not allowed"})


# ---------------------------------------------------------------------------
# Autouse hygiene
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_process_state() -> Iterator[None]:
    """Undo global state the CLI configures (root log handlers, telemetry)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    try:
        yield
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
        disable_telemetry()


# ---------------------------------------------------------------------------
# Catalogs and sessions
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> ModuleRegistry:
    return ModuleRegistry.builtin()


@pytest.fixture
def themes() -> ThemeCatalog:
    return ThemeCatalog.builtin()


@pytest.fixture
def profile() -> StoreProfile:
    return StoreProfile.model_validate(PROFILE)


@pytest.fixture
def session(registry: ModuleRegistry, themes: ThemeCatalog) -> EditorSession:
    """Fresh editing session on the default layout for store 42."""
    return EditorSession.create(STORE_ID, registry=registry, themes=themes)


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_api() -> FakeStorefrontApi:
    return FakeStorefrontApi()


@pytest.fixture
def make_gateway(fake_api: FakeStorefrontApi) -> Callable[..., PersistenceGateway]:
    """Factory for gateways wired to ``fake_api``; use as ``async with make_gateway() as gw``."""
    return functools.partial(PersistenceGateway, BASE_URL, transport=fake_api.transport())


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the CLI from an empty temp project with no inherited config.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    for var in (
        "STOREFRONTCTL_CONFIG",
        "STOREFRONTCTL_STORE_ID",
        "STOREFRONTCTL_TOKEN",
        "STOREFRONTCTL_API__BASE_URL",
        "STOREFRONTCTL_DRAFTS__DIRECTORY",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def _offline_api(fake_api: FakeStorefrontApi, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point every CLI-built gateway at ``fake_api``."""
    monkeypatch.setattr(
        "storefrontctl.commands._context.PersistenceGateway",
        functools.partial(PersistenceGateway, transport=fake_api.transport()),
    )


# ---------------------------------------------------------------------------
# Shared test helpers (used across command test modules)
# ---------------------------------------------------------------------------


def invoke(runner: CliRunner, *args: str) -> Any:
    """Invoke the root CLI against store 42 with ``--json``."""
    from storefrontctl.cli import cli

    return runner.invoke(cli, ["--json", "--store", str(STORE_ID), *args])


def init_draft(runner: CliRunner, *extra: str) -> dict[str, Any]:
    """Create an offline draft for store 42, asserting success."""
    result = invoke(runner, "init", "--offline", *extra)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)["data"]
