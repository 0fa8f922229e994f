"""Active/upcoming partitioning of feed events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from models.feeds import GameEvent
from utils.time import align_to, parse_timestamp

DEFAULT_UPCOMING_DAYS = 7

RAID_EVENT_TYPES = frozenset({"raid-day", "raid-battles", "raid-hour"})


@dataclass(frozen=True, slots=True)
class EventPartition:
    active: tuple[GameEvent, ...] = ()
    upcoming: tuple[GameEvent, ...] = ()


def _bounds(event: GameEvent, now: datetime) -> tuple[Optional[datetime], Optional[datetime]]:
    start = parse_timestamp(event.start)
    end = parse_timestamp(event.end)
    return (
        align_to(start, now) if start else None,
        align_to(end, now) if end else None,
    )


def is_active_event(event: GameEvent, now: datetime) -> bool:
    start, end = _bounds(event, now)
    if start is None or end is None:
        return False
    return start <= now <= end


def is_upcoming_event(event: GameEvent, now: datetime, until: datetime | None = None) -> bool:
    start, _ = _bounds(event, now)
    if start is None or start <= now:
        return False
    if until is None:
        return True
    return start <= align_to(until, now)


def upcoming_horizon(now: datetime, days: int = DEFAULT_UPCOMING_DAYS) -> datetime:
    return now + timedelta(days=days)


def partition_events(
    events: Iterable[GameEvent],
    now: datetime,
    until: datetime | None = None,
) -> EventPartition:
    """Split ``events`` into active and upcoming, keeping feed order.

    Events with unreadable start/end times land in neither list.
    """
    active: List[GameEvent] = []
    upcoming: List[GameEvent] = []
    for event in events:
        if is_active_event(event, now):
            active.append(event)
        elif is_upcoming_event(event, now, until):
            upcoming.append(event)
    return EventPartition(active=tuple(active), upcoming=tuple(upcoming))


def is_raid_event(event: GameEvent) -> bool:
    return event.event_type in RAID_EVENT_TYPES or "raid" in event.name.lower()


def _day_label(value: datetime) -> str:
    return f"{value:%b} {value.day}"


def format_availability(event: GameEvent) -> Optional[str]:
    """Human date range such as ``"Oct 18 - Oct 20"``."""
    start = parse_timestamp(event.start)
    end = parse_timestamp(event.end)
    if start is None:
        return None
    if end is None or end.date() == start.date():
        return _day_label(start)
    return f"{_day_label(start)} - {_day_label(end)}"


__all__ = [
    "DEFAULT_UPCOMING_DAYS",
    "EventPartition",
    "RAID_EVENT_TYPES",
    "format_availability",
    "is_active_event",
    "is_raid_event",
    "is_upcoming_event",
    "partition_events",
    "upcoming_horizon",
]
