"""
Value types consumed by the analytics engines.

The engines work on VectorPoint snapshots taken once at call start; they
never touch the store themselves.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes; aware values are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class VectorPoint:
    """One stored vector as seen by analytics."""

    id: str
    vector: list[float]
    created_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_type: str | None = None
    source_id: str | None = None
