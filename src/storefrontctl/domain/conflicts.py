"""Declarative cross-module conflict rules and their single resolver.

A rule names a *holder* type, a *dependent* type, and the boolean setting
through which the dependent exposes a shared capability. New module types
declare rules here instead of special-casing callers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from storefrontctl.domain.types import ModuleType

if TYPE_CHECKING:
    from storefrontctl.domain.module_list import ModuleList
    from storefrontctl.domain.modules import BaseModule

log = structlog.get_logger(__name__)


class Resolution(StrEnum):
    """How a rule settles a conflict."""

    # Any holder present forces every dependent off; removing the last
    # holder turns dependents back on.
    HOLDER_WINS = "holder-wins"
    # Among all members exposing the capability, only the most recently
    # added keeps it.
    NEWEST_WINS = "newest-wins"


@dataclass(frozen=True)
class CrossModuleConstraint:
    """At most one side of ``(holder, dependent)`` exposes ``setting``."""

    holder: ModuleType
    dependent: ModuleType
    setting: str
    resolution: Resolution = Resolution.HOLDER_WINS

    @property
    def name(self) -> str:
        return f"{self.holder}/{self.dependent}:{self.setting}"


@dataclass(frozen=True)
class ConflictChange:
    """One setting forced by a rule."""

    module_id: str
    setting: str
    value: bool
    rule: str


BUILTIN_RULES: tuple[CrossModuleConstraint, ...] = (
    CrossModuleConstraint(
        holder=ModuleType.CONTACT_FORM,
        dependent=ModuleType.POLICY_SECTION,
        setting="showContact",
    ),
)


def _set_flag(module: BaseModule, setting: str, value: bool) -> None:
    module.settings = module.settings.merged({setting: value})


class ConflictResolver:
    """Re-normalizes a module list against a fixed rule table."""

    def __init__(self, rules: Iterable[CrossModuleConstraint] = BUILTIN_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[CrossModuleConstraint, ...]:
        return self._rules

    def resolve(
        self,
        modules: ModuleList,
        *,
        removed: BaseModule | None = None,
    ) -> list[ConflictChange]:
        """Apply every rule to *modules* in place.

        Args:
            modules: The list to normalize.
            removed: The module just removed, if this call follows a removal.

        Returns:
            The settings changes applied, in rule order.
        """
        changes: list[ConflictChange] = []
        for rule in self._rules:
            if rule.resolution == Resolution.HOLDER_WINS:
                changes.extend(self._holder_wins(rule, modules, removed))
            else:
                changes.extend(self._newest_wins(rule, modules))
        for change in changes:
            log.debug(
                "conflict.resolved",
                rule=change.rule,
                module_id=change.module_id,
                setting=change.setting,
                value=change.value,
            )
        return changes

    def _holder_wins(
        self,
        rule: CrossModuleConstraint,
        modules: ModuleList,
        removed: BaseModule | None,
    ) -> list[ConflictChange]:
        holders = [m for m in modules if m.type == rule.holder]
        dependents = [m for m in modules if m.type == rule.dependent]
        changes: list[ConflictChange] = []

        if holders:
            for module in dependents:
                if module.settings.get(rule.setting) is not False:
                    _set_flag(module, rule.setting, False)
                    changes.append(ConflictChange(module.id, rule.setting, False, rule.name))
        elif removed is not None and removed.type == rule.holder:
            for module in dependents:
                if module.settings.get(rule.setting) is not True:
                    _set_flag(module, rule.setting, True)
                    changes.append(ConflictChange(module.id, rule.setting, True, rule.name))
        return changes

    def _newest_wins(
        self, rule: CrossModuleConstraint, modules: ModuleList
    ) -> list[ConflictChange]:
        members = [
            m
            for m in modules
            if m.type in (rule.holder, rule.dependent) and m.settings.get(rule.setting) is True
        ]
        if len(members) < 2:
            return []
        members.sort(key=lambda m: modules.recency(m.id))
        changes: list[ConflictChange] = []
        for module in members[:-1]:
            _set_flag(module, rule.setting, False)
            changes.append(ConflictChange(module.id, rule.setting, False, rule.name))
        return changes
