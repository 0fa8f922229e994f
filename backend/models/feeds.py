"""Typed records for the five external availability feeds.

Feed payloads arrive as loosely-shaped JSON (ScrapedDuck-style ``*.min.json``
dumps). Each record type exposes a ``from_payload`` parser that tolerates
missing keys and wrong types, dropping what it cannot use rather than raising.
Event enrichment is parsed into an explicit variant so the scorer can branch
on which kind of detail data an event actually carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _dicts(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _names(value: Any) -> tuple[str, ...]:
    names = []
    for item in _dicts(value):
        name = _text(item.get("name"))
        if name:
            names.append(name)
    return tuple(names)


@dataclass(frozen=True, slots=True)
class RaidBoss:
    name: str
    tier: str
    can_be_shiny: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Optional["RaidBoss"]:
        name = _text(payload.get("name"))
        if not name:
            return None
        return cls(
            name=name,
            tier=_text(payload.get("tier")),
            can_be_shiny=bool(payload.get("canBeShiny")),
        )


@dataclass(frozen=True, slots=True)
class EventEgg:
    name: str
    egg_distance: str


@dataclass(frozen=True, slots=True)
class EventResearchTask:
    task: str
    rewards: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class GenericEnrichment:
    """Scraped event detail: spawns, eggs and research rewards.

    ``bosses`` carries the legacy raid-battle boss list when the event also has
    one, so the scorer can fall back to it as a spawn proxy.
    """

    has_spawns: bool = False
    spawns: tuple[str, ...] = ()
    eggs: tuple[EventEgg, ...] = ()
    research: tuple[EventResearchTask, ...] = ()
    bosses: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RaidBattlesEnrichment:
    """Legacy event detail that only lists raid bosses."""

    bosses: tuple[str, ...] = ()
    shinies: tuple[str, ...] = ()


EventEnrichment = Union[GenericEnrichment, RaidBattlesEnrichment, None]


def parse_enrichment(extra: Any) -> EventEnrichment:
    if not isinstance(extra, dict):
        return None
    generic = extra.get("generic")
    raidbattles = extra.get("raidbattles") if isinstance(extra.get("raidbattles"), dict) else {}
    bosses = _names(raidbattles.get("bosses"))
    if isinstance(generic, dict):
        eggs = tuple(
            EventEgg(name=_text(egg.get("name")), egg_distance=_text(egg.get("eggDistance")))
            for egg in _dicts(generic.get("eventEggs"))
            if _text(egg.get("name"))
        )
        research = tuple(
            EventResearchTask(task=_text(task.get("task")), rewards=_names(task.get("rewards")))
            for task in _dicts(generic.get("eventResearch"))
        )
        return GenericEnrichment(
            has_spawns=bool(generic.get("hasSpawns")),
            spawns=_names(generic.get("spawns")),
            eggs=eggs,
            research=research,
            bosses=bosses,
        )
    if raidbattles:
        return RaidBattlesEnrichment(bosses=bosses, shinies=_names(raidbattles.get("shinies")))
    return None


@dataclass(frozen=True, slots=True)
class GameEvent:
    event_id: str
    name: str
    event_type: str = ""
    start: str = ""
    end: str = ""
    link: str = ""
    heading: str = ""
    enrichment: EventEnrichment = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Optional["GameEvent"]:
        name = _text(payload.get("name"))
        event_id = _text(payload.get("eventID")) or name
        if not event_id:
            return None
        return cls(
            event_id=event_id,
            name=name,
            event_type=_text(payload.get("eventType")),
            start=_text(payload.get("start")),
            end=_text(payload.get("end")),
            link=_text(payload.get("link")),
            heading=_text(payload.get("heading")),
            enrichment=parse_enrichment(payload.get("extraData")),
        )

    @property
    def boss_names(self) -> tuple[str, ...]:
        if isinstance(self.enrichment, (GenericEnrichment, RaidBattlesEnrichment)):
            return self.enrichment.bosses
        return ()


@dataclass(frozen=True, slots=True)
class ResearchTask:
    text: str
    rewards: tuple[str, ...] = ()
    task_type: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Optional["ResearchTask"]:
        text = _text(payload.get("text"))
        rewards = _names(payload.get("rewards"))
        if not text and not rewards:
            return None
        return cls(text=text, rewards=rewards, task_type=_text(payload.get("type")))


@dataclass(frozen=True, slots=True)
class EggEntry:
    name: str
    egg_type: str
    is_adventure_sync: bool = False
    is_regional: bool = False
    rarity: int = 0

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Optional["EggEntry"]:
        name = _text(payload.get("name"))
        if not name:
            return None
        try:
            rarity = int(payload.get("rarity") or 0)
        except (TypeError, ValueError):
            rarity = 0
        return cls(
            name=name,
            egg_type=_text(payload.get("eggType")),
            is_adventure_sync=bool(payload.get("isAdventureSync")),
            is_regional=bool(payload.get("isRegional")),
            rarity=rarity,
        )


@dataclass(frozen=True, slots=True)
class RocketSlot:
    name: str
    is_encounter: bool = False


@dataclass(frozen=True, slots=True)
class RocketLineup:
    name: str
    title: str = ""
    type: str = ""
    first_pokemon: tuple[RocketSlot, ...] = ()
    second_pokemon: tuple[RocketSlot, ...] = ()
    third_pokemon: tuple[RocketSlot, ...] = ()

    @staticmethod
    def _slots(value: Any) -> tuple[RocketSlot, ...]:
        return tuple(
            RocketSlot(name=_text(slot.get("name")), is_encounter=bool(slot.get("isEncounter")))
            for slot in _dicts(value)
            if _text(slot.get("name"))
        )

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Optional["RocketLineup"]:
        name = _text(payload.get("name"))
        if not name:
            return None
        return cls(
            name=name,
            title=_text(payload.get("title")),
            type=_text(payload.get("type")),
            first_pokemon=cls._slots(payload.get("firstPokemon")),
            second_pokemon=cls._slots(payload.get("secondPokemon", payload.get("secondPomon"))),
            third_pokemon=cls._slots(payload.get("thirdPokemon")),
        )

    @property
    def all_slots(self) -> tuple[RocketSlot, ...]:
        return self.first_pokemon + self.second_pokemon + self.third_pokemon

    @property
    def is_leader(self) -> bool:
        return "Leader" in self.title or "Boss" in self.title


def _parse_list(payload: Any, parser) -> list:
    records = []
    for item in _dicts(payload):
        record = parser(item)
        if record is not None:
            records.append(record)
    return records


@dataclass(frozen=True, slots=True)
class FeedBundle:
    """All five feeds, materialized in memory."""

    events: tuple[GameEvent, ...] = ()
    raids: tuple[RaidBoss, ...] = ()
    research: tuple[ResearchTask, ...] = ()
    eggs: tuple[EggEntry, ...] = ()
    rockets: tuple[RocketLineup, ...] = ()

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "FeedBundle":
        payload = payload if isinstance(payload, dict) else {}
        return cls(
            events=tuple(_parse_list(payload.get("events"), GameEvent.from_payload)),
            raids=tuple(_parse_list(payload.get("raids"), RaidBoss.from_payload)),
            research=tuple(_parse_list(payload.get("research"), ResearchTask.from_payload)),
            eggs=tuple(_parse_list(payload.get("eggs"), EggEntry.from_payload)),
            rockets=tuple(_parse_list(payload.get("rockets"), RocketLineup.from_payload)),
        )

    def counts(self) -> Dict[str, int]:
        return {
            "events": len(self.events),
            "raids": len(self.raids),
            "research": len(self.research),
            "eggs": len(self.eggs),
            "rockets": len(self.rockets),
        }


def parse_records(payload: Any, parser) -> list:
    """Parse a raw JSON list with one of the ``from_payload`` parsers."""
    return _parse_list(payload, parser)


__all__ = [
    "EggEntry",
    "EventEgg",
    "EventEnrichment",
    "EventResearchTask",
    "FeedBundle",
    "GameEvent",
    "GenericEnrichment",
    "RaidBattlesEnrichment",
    "RaidBoss",
    "ResearchTask",
    "RocketLineup",
    "RocketSlot",
    "parse_enrichment",
    "parse_records",
]
