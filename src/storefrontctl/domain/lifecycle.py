"""Editor lifecycle: states and the allowed transitions between them.

A session starts in ``draft``. Saving and publishing pass through their
in-flight states and return to ``draft`` (or land in ``published``).
Any edit to a published session drops it back to ``draft``.
"""

from __future__ import annotations

from enum import StrEnum


class EditorState(StrEnum):
    """Lifecycle states of an editing session."""

    DRAFT = "draft"
    SAVING = "saving"
    VALIDATING = "validating"
    PUBLISHING = "publishing"
    PUBLISHED = "published"


# States in which a network operation is outstanding.
IN_FLIGHT_STATES: frozenset[str] = frozenset(
    {EditorState.SAVING, EditorState.VALIDATING, EditorState.PUBLISHING}
)

EDITOR_TRANSITIONS: dict[str, list[str]] = {
    "draft": ["saving", "validating"],
    "validating": ["saving", "draft"],
    # a publish flow saves first, then publishes
    "saving": ["draft", "published", "publishing"],
    "publishing": ["published", "draft"],
    "published": ["draft", "saving", "validating"],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = EDITOR_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
