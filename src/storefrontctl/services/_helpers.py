"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO 8601 timestamp from an API payload, tolerating ``Z``.

    Examples:
        >>> parse_timestamp("2024-05-01T12:00:00Z").isoformat()
        '2024-05-01T12:00:00+00:00'
        >>> parse_timestamp(None) is None
        True
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
