"""Scorer output records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SOURCE_RAID = "raid"
SOURCE_SHADOW_RAID = "shadow-raid"
SOURCE_UPCOMING_RAID = "upcoming-raid"
SOURCE_EVENT = "event"
SOURCE_UPCOMING = "upcoming"
SOURCE_RESEARCH = "research"
SOURCE_EGG = "egg"
SOURCE_ROCKET = "rocket"

SOURCE_TYPES: tuple[str, ...] = (
    SOURCE_RAID,
    SOURCE_SHADOW_RAID,
    SOURCE_UPCOMING_RAID,
    SOURCE_EVENT,
    SOURCE_UPCOMING,
    SOURCE_RESEARCH,
    SOURCE_EGG,
    SOURCE_ROCKET,
)

NEEDED_BOTH = "both"
NEEDED_YOU = "you"
NEEDED_PARTNER = "partner"

# Tie-break rank inside a score tier; unset sorts with "you".
NEEDED_BY_RANK: Dict[Optional[str], int] = {
    NEEDED_BOTH: 0,
    NEEDED_YOU: 1,
    None: 1,
    NEEDED_PARTNER: 2,
}


@dataclass(frozen=True, slots=True)
class PrioritySource:
    type: str
    label: str
    detail: str
    availability: Optional[str] = None
    link: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type, "label": self.label, "detail": self.detail}
        if self.availability:
            payload["availability"] = self.availability
        if self.link:
            payload["link"] = self.link
        return payload


@dataclass(slots=True)
class PriorityEntry:
    """Accumulated availability for one missing creature.

    Created on the first matching source record; later matches add to
    ``score`` and append to ``sources`` in processing order.
    """

    dex_number: int
    name: str
    normalized_name: str
    score: int = 0
    sources: List[PrioritySource] = field(default_factory=list)
    needed_by: Optional[str] = None

    def add(self, points: int, source: PrioritySource) -> None:
        self.score += points
        self.sources.append(source)

    def has_source(self, source_type: str) -> bool:
        return any(source.type == source_type for source in self.sources)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "dexNumber": self.dex_number,
            "name": self.name,
            "normalizedName": self.normalized_name,
            "score": self.score,
            "sources": [source.to_dict() for source in self.sources],
        }
        if self.needed_by is not None:
            payload["neededBy"] = self.needed_by
        return payload


__all__ = [
    "NEEDED_BOTH",
    "NEEDED_BY_RANK",
    "NEEDED_PARTNER",
    "NEEDED_YOU",
    "PriorityEntry",
    "PrioritySource",
    "SOURCE_EGG",
    "SOURCE_EVENT",
    "SOURCE_RAID",
    "SOURCE_RESEARCH",
    "SOURCE_ROCKET",
    "SOURCE_SHADOW_RAID",
    "SOURCE_TYPES",
    "SOURCE_UPCOMING",
    "SOURCE_UPCOMING_RAID",
]
