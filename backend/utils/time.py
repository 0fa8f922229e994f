"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: str | None) -> Optional[datetime]:
    """Parse an ISO-8601 feed timestamp; blank or malformed input yields None."""
    text = (value or "").strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def align_to(value: datetime, reference: datetime) -> datetime:
    """Make ``value`` comparable with ``reference``.

    Feed times are usually wall-clock local time without an offset; those are
    read in the reference's zone. Aware values compared against a naive
    reference keep their wall-clock reading.
    """
    if value.tzinfo is None and reference.tzinfo is not None:
        return value.replace(tzinfo=reference.tzinfo)
    if value.tzinfo is not None and reference.tzinfo is None:
        return value.replace(tzinfo=None)
    return value
