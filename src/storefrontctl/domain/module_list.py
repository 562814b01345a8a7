"""ModuleList — the ordered collection of module instances.

INVARIANT: ``order`` values are a dense permutation of ``0..n-1`` after
every public operation. Reindexing on removal builds the new list before
swapping it in, so no caller ever observes a gap.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from storefrontctl.domain.conflicts import ConflictChange, ConflictResolver
from storefrontctl.domain.modules import MODULE_CLASSES, BaseModule
from storefrontctl.domain.registry import DEFAULT_LAYOUT, ModuleRegistry
from storefrontctl.domain.types import Direction
from storefrontctl.domain.validation import ValidationResult

log = structlog.get_logger(__name__)

_ID_SUFFIX = re.compile(r"-(\d+)$")


class ModuleList:
    """Ordered, conflict-normalized list of modules for one storefront."""

    def __init__(
        self,
        registry: ModuleRegistry,
        modules: Iterable[BaseModule] = (),
        *,
        resolver: ConflictResolver | None = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver if resolver is not None else ConflictResolver()
        self._modules: list[BaseModule] = []
        self._recency: dict[str, int] = {}
        self._sequence = 0
        self._id_counter = 0
        for module in sorted(modules, key=lambda m: m.order):
            self._modules.append(module)
            self._touch(module.id)
            self._seed_counter(module.id)

    # -- read access ------------------------------------------------------

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[BaseModule]:
        return iter(self._modules)

    def get(self, module_id: str) -> BaseModule | None:
        for module in self._modules:
            if module.id == module_id:
                return module
        return None

    def ordered(self) -> list[BaseModule]:
        return sorted(self._modules, key=lambda m: m.order)

    def enabled(self) -> list[BaseModule]:
        return [m for m in self.ordered() if m.enabled]

    def ids(self) -> list[str]:
        return [m.id for m in self._modules]

    def recency(self, module_id: str) -> int:
        """Insertion sequence of *module_id*; higher is more recent."""
        return self._recency.get(module_id, 0)

    def check_ordering(self) -> bool:
        """True when orders are exactly ``0..n-1``."""
        return sorted(m.order for m in self._modules) == list(range(len(self._modules)))

    # -- mutations --------------------------------------------------------

    def add(self, module_type: str) -> BaseModule:
        """Append a new module of *module_type* built from its template.

        Raises:
            KeyError: If the registry has no template for the type.
        """
        template = self._registry.template_for(module_type)
        module_cls = MODULE_CLASSES[template.type]
        module = module_cls(
            id=self._next_id(str(template.type)),
            title=template.name,
            description=template.description,
            icon=template.icon,
            enabled=True,
            order=len(self._modules),
            settings=template.new_settings(),
        )
        self._modules.append(module)
        self._touch(module.id)
        self._resolver.resolve(self)
        return module

    def remove(self, module_id: str) -> BaseModule | None:
        """Remove *module_id* and reindex the rest to ``0..n-2``."""
        target = self.get(module_id)
        if target is None:
            log.warning("module.unknown_id", op="remove", module_id=module_id)
            return None
        remaining = [m for m in self.ordered() if m.id != module_id]
        for index, module in enumerate(remaining):
            module.order = index
        self._modules = remaining
        self._recency.pop(module_id, None)
        self._resolver.resolve(self, removed=target)
        return target

    def move(self, module_id: str, direction: Direction | str) -> bool:
        """Swap *module_id* with its neighbour. No-op at either boundary."""
        ordered = self.ordered()
        position = next((i for i, m in enumerate(ordered) if m.id == module_id), None)
        if position is None:
            log.warning("module.unknown_id", op="move", module_id=module_id)
            return False
        neighbour = position - 1 if Direction(direction) == Direction.UP else position + 1
        if neighbour < 0 or neighbour >= len(ordered):
            return False
        current, other = ordered[position], ordered[neighbour]
        current.order, other.order = other.order, current.order
        return True

    def toggle(self, module_id: str) -> bool | None:
        """Flip ``enabled``. Returns the new value, or None for an unknown id."""
        module = self.get(module_id)
        if module is None:
            log.warning("module.unknown_id", op="toggle", module_id=module_id)
            return None
        module.enabled = not module.enabled
        return module.enabled

    def update_settings(self, module_id: str, partial: Mapping[str, Any]) -> ValidationResult:
        """Shallow-merge *partial* into a module's settings.

        Keys may be Python names or wire keys. Keys owned by the data
        enricher are refused with a warning; the rest are applied only if
        the merged settings still validate.
        """
        module = self.get(module_id)
        if module is None:
            log.warning("module.unknown_id", op="update_settings", module_id=module_id)
            return ValidationResult.failed([f"Unknown module: {module_id}"])

        settings_cls = type(module.settings)
        reserved = settings_cls.enriched_wire_keys()
        accepted: dict[str, Any] = {}
        warnings: list[str] = []
        for key, value in partial.items():
            if settings_cls.wire_key(key) in reserved:
                warnings.append(f"'{key}' is managed from store data and cannot be edited")
                continue
            accepted[key] = value

        if not accepted:
            return ValidationResult.ok(warnings)
        try:
            module.settings = module.settings.merged(accepted)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            ]
            return ValidationResult.failed(errors, warnings)
        return ValidationResult.ok(warnings)

    def update_details(
        self,
        module_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> bool:
        """Change a module's display title or description."""
        module = self.get(module_id)
        if module is None:
            log.warning("module.unknown_id", op="update_details", module_id=module_id)
            return False
        if title is not None:
            module.title = title
        if description is not None:
            module.description = description
        return True

    def normalize(self) -> bool:
        """Repair sparse or duplicate orders, keeping relative order.

        Returns True if any order value changed.
        """
        changed = False
        for index, module in enumerate(self.ordered()):
            if module.order != index:
                module.order = index
                changed = True
        self._modules = self.ordered()
        return changed

    def resolve_conflicts(self) -> list[ConflictChange]:
        return self._resolver.resolve(self)

    # -- internals --------------------------------------------------------

    def _touch(self, module_id: str) -> None:
        self._sequence += 1
        self._recency[module_id] = self._sequence

    def _seed_counter(self, module_id: str) -> None:
        match = _ID_SUFFIX.search(module_id)
        if match:
            self._id_counter = max(self._id_counter, int(match.group(1)))

    def _next_id(self, module_type: str) -> str:
        existing = set(self.ids())
        while True:
            self._id_counter += 1
            candidate = f"{module_type}-{self._id_counter}"
            if candidate not in existing:
                return candidate


def default_modules(
    registry: ModuleRegistry,
    *,
    resolver: ConflictResolver | None = None,
) -> ModuleList:
    """Build the first-time module set for a store with no saved layout."""
    modules = ModuleList(registry, resolver=resolver)
    for module_type in DEFAULT_LAYOUT:
        modules.add(module_type)
    return modules
