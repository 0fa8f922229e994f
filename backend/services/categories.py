"""Group a ranked priority list into the four browse categories."""

from __future__ import annotations

import re
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

from models.priority import (
    SOURCE_EGG,
    SOURCE_EVENT,
    SOURCE_RAID,
    SOURCE_RESEARCH,
    SOURCE_ROCKET,
    SOURCE_SHADOW_RAID,
    SOURCE_UPCOMING,
    SOURCE_UPCOMING_RAID,
    PriorityEntry,
    PrioritySource,
)

CATEGORY_SOURCE_TYPES: "OrderedDict[str, frozenset[str]]" = OrderedDict(
    [
        ("raids", frozenset({SOURCE_RAID, SOURCE_SHADOW_RAID, SOURCE_UPCOMING_RAID})),
        ("wild", frozenset({SOURCE_EVENT, SOURCE_RESEARCH, SOURCE_UPCOMING})),
        ("rocket", frozenset({SOURCE_ROCKET})),
        ("eggs", frozenset({SOURCE_EGG})),
    ]
)

_DISTANCE_RE = re.compile(r"(\d+)")
_NO_DISTANCE = 999


@dataclass(frozen=True, slots=True)
class CategorizedCreature:
    name: str
    sources: tuple[PrioritySource, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "sources": [source.to_dict() for source in self.sources]}


def egg_distance(sources: Sequence[PrioritySource]) -> int:
    for source in sources:
        if source.type != SOURCE_EGG:
            continue
        match = _DISTANCE_RE.search(source.label)
        if match:
            return int(match.group(1))
    return _NO_DISTANCE


def categorize_priorities(entries: Iterable[PriorityEntry]) -> "OrderedDict[str, List[CategorizedCreature]]":
    result: "OrderedDict[str, List[CategorizedCreature]]" = OrderedDict(
        (category, []) for category in CATEGORY_SOURCE_TYPES
    )
    for entry in entries:
        for category, types in CATEGORY_SOURCE_TYPES.items():
            matching = tuple(source for source in entry.sources if source.type in types)
            if matching:
                result[category].append(CategorizedCreature(name=entry.name, sources=matching))
    result["eggs"].sort(key=lambda item: egg_distance(item.sources))
    return result


__all__ = ["CATEGORY_SOURCE_TYPES", "CategorizedCreature", "categorize_priorities", "egg_distance"]
