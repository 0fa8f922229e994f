"""Roster dataclasses: the player's lucky list and a partner's lucky set."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from utils.time import utcnow

DEFAULT_PARTNER_NAME = "Partner"


@dataclass(frozen=True, slots=True)
class Creature:
    """One species entry in a roster. Identity is ``dex_number``."""

    dex_number: int
    name: str
    is_lucky: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"dexNumber": self.dex_number, "name": self.name, "isLucky": self.is_lucky}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Optional["Creature"]:
        """Build a creature from a JSON-ish mapping, or return None when unusable."""
        if not isinstance(payload, dict):
            return None
        raw_dex = payload.get("dexNumber", payload.get("dex_number"))
        if isinstance(raw_dex, bool):
            return None
        try:
            dex_number = int(raw_dex)
        except (TypeError, ValueError, OverflowError):
            return None
        name = str(payload.get("name") or "").strip()
        if dex_number < 1 or not name:
            return None
        raw_lucky = payload.get("isLucky", payload.get("is_lucky", False))
        return cls(dex_number=dex_number, name=name, is_lucky=bool(raw_lucky))


@dataclass(frozen=True, slots=True)
class Roster:
    """A player's lucky list, unique per dex number.

    Instances are immutable; every mutation helper returns a new roster with a
    fresh ``last_updated`` stamp so callers can keep using the old reference.
    """

    creatures: tuple[Creature, ...] = ()
    last_updated: datetime = field(default_factory=utcnow)

    @classmethod
    def build(cls, creatures: Iterable[Creature], last_updated: datetime | None = None) -> "Roster":
        seen: set[int] = set()
        unique: list[Creature] = []
        for creature in creatures:
            if creature.dex_number in seen:
                continue
            seen.add(creature.dex_number)
            unique.append(creature)
        return cls(creatures=tuple(unique), last_updated=last_updated or utcnow())

    def with_creatures(self, creatures: Iterable[Creature]) -> "Roster":
        """Bulk replace, as done by a spreadsheet import."""
        return Roster.build(creatures)

    def toggle_lucky(self, dex_number: int) -> "Roster":
        flipped = tuple(
            replace(creature, is_lucky=not creature.is_lucky)
            if creature.dex_number == dex_number
            else creature
            for creature in self.creatures
        )
        return Roster(creatures=flipped, last_updated=utcnow())

    def get(self, dex_number: int) -> Optional[Creature]:
        for creature in self.creatures:
            if creature.dex_number == dex_number:
                return creature
        return None

    @property
    def lucky_count(self) -> int:
        return sum(1 for creature in self.creatures if creature.is_lucky)

    @property
    def total_count(self) -> int:
        return len(self.creatures)

    def __iter__(self):
        return iter(self.creatures)

    def __len__(self) -> int:
        return len(self.creatures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pokemon": [creature.to_dict() for creature in self.creatures],
            "lastUpdated": self.last_updated.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class PartnerRoster:
    """A second player's lucky set. Only dex numbers are carried."""

    name: str = DEFAULT_PARTNER_NAME
    lucky_dex_numbers: frozenset[int] = frozenset()
    updated_at: str = ""

    @property
    def lucky_count(self) -> int:
        return len(self.lucky_dex_numbers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "dex": sorted(self.lucky_dex_numbers),
            "updatedAt": self.updated_at,
        }


__all__ = ["Creature", "DEFAULT_PARTNER_NAME", "PartnerRoster", "Roster"]
