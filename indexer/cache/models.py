"""Dataclass models for the status cache.

These are plain Python objects.  The store serialises / deserialises them to
and from the on-disk JSON shape ``{"status": ..., "lastCheckedAt": ...}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    """Current UTC instant, truncated to millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Render *value* as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        ValueError: *value* is not an ISO-8601 timestamp.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class StatusRecord:
    """Last known indexing status of one URL."""

    status: str
    last_checked_at: datetime

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, str]:
        return {
            "status": self.status,
            "lastCheckedAt": format_timestamp(self.last_checked_at),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> StatusRecord:
        """Build a record from its JSON form.

        Raises:
            ValueError: *raw* does not have the expected shape.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"expected an object, got {type(raw).__name__}")
        status = raw.get("status")
        checked = raw.get("lastCheckedAt")
        if not isinstance(status, str) or not isinstance(checked, str):
            raise ValueError("record needs string 'status' and 'lastCheckedAt' fields")
        return cls(status=status, last_checked_at=parse_timestamp(checked))
