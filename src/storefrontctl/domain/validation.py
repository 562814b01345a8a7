"""Pre-publish validation of a customization document."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from storefrontctl.domain.registry import ModuleRegistry
from storefrontctl.domain.themes import ThemeCatalog

if TYPE_CHECKING:
    from storefrontctl.domain.document import CustomizationDocument
    from storefrontctl.domain.modules import BaseModule


@dataclass(frozen=True)
class ValidationResult:
    """Result of a validation check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, warnings: Iterable[str] = ()) -> ValidationResult:
        return cls(valid=True, warnings=list(warnings))

    @classmethod
    def failed(cls, errors: Iterable[str], warnings: Iterable[str] = ()) -> ValidationResult:
        return cls(valid=False, errors=list(errors), warnings=list(warnings))


def validate_module(module: BaseModule, registry: ModuleRegistry) -> tuple[list[str], list[str]]:
    """Return ``(errors, warnings)`` for one module's required settings.

    Disabled modules never block a publish; their gaps are warnings.
    """
    template = registry.template_for(module.type)
    missing = module.settings.missing(template.required_settings)
    if not missing:
        return [], []
    message = f"Module '{module.id}' ({module.type}) is missing required settings: " + ", ".join(
        missing
    )
    if module.enabled:
        return [message], []
    return [], [message]


def validate_document(
    document: CustomizationDocument,
    registry: ModuleRegistry,
    themes: ThemeCatalog,
) -> ValidationResult:
    """Check that *document* is fit to publish.

    Checks: the theme exists, module ids are unique, ordering is a dense
    permutation, and every enabled module has its required settings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not themes.contains(document.theme_id):
        errors.append(f"Unknown theme: {document.theme_id}")

    seen: set[str] = set()
    for module in document.modules:
        if module.id in seen:
            errors.append(f"Duplicate module id: {module.id}")
        seen.add(module.id)

    if not document.modules.check_ordering():
        errors.append("Module order is not a dense sequence starting at 0")

    for module in document.modules:
        module_errors, module_warnings = validate_module(module, registry)
        errors.extend(module_errors)
        warnings.extend(module_warnings)

    if errors:
        return ValidationResult.failed(errors, warnings)
    return ValidationResult.ok(warnings)
