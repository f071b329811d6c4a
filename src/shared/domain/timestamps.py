"""ISO-8601 parsing for timestamps sent by the remote store."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse ``2024-05-01T10:30:00``, ``2024-05-01`` or a ``...Z`` UTC stamp.

    Empty values map to ``None``.

    Raises:
        ValueError: the value is not an ISO-8601 date or datetime.
    """
    if not value:
        return None
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_date(value: Optional[str]) -> Optional[date]:
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None
