"""Availability scoring for missing lucky creatures.

Every feed record is matched against the pool of missing creatures and, on a
hit, credits that creature with category-specific points and a provenance
entry. The result is a ranked list suitable for direct rendering.

Point values per record:

- raid boss: 5 for Mega or 5-star tiers, 4 for 3-star, 3 otherwise
- shadow raid boss: 2 (needs purifying and a special trade)
- active event spawn (or its raid-boss list as a stand-in): 4
- active event research reward: 2
- active event egg: 1
- upcoming event spawn within the horizon: 1
- research feed reward: 2
- egg feed entry: 1
- rocket lineup encounter: 2 for leaders and the boss, 1 for grunts
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

from models.creature import Creature
from models.feeds import FeedBundle, GameEvent, GenericEnrichment, RocketSlot
from models.priority import (
    NEEDED_BOTH,
    NEEDED_BY_RANK,
    NEEDED_PARTNER,
    NEEDED_YOU,
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
from services.event_windows import (
    DEFAULT_UPCOMING_DAYS,
    format_availability,
    is_raid_event,
    partition_events,
    upcoming_horizon,
)
from services.lucky_share import MAX_DEX_NUMBER
from services.name_matching import MissingRosterIndex, base_name, normalize_name
from utils.time import utcnow

__all__ = [
    "POINTS",
    "build_missing_pool",
    "placeholder_name",
    "score_creatures",
    "tier_score",
]

_LOG = logging.getLogger(__name__)

POINTS: Dict[str, int] = {
    "shadow_raid": 2,
    "event_spawn": 4,
    "event_research": 2,
    "event_egg": 1,
    "upcoming": 1,
    "research": 2,
    "egg": 1,
    "rocket_leader": 2,
    "rocket_grunt": 1,
}

T = TypeVar("T")


def tier_score(tier: str) -> int:
    if "Mega" in tier or "5" in tier:
        return 5
    if "3" in tier:
        return 4
    return 3


def placeholder_name(dex_number: int) -> str:
    return f"Creature {dex_number}"


def _dedupe_by_key(items: Iterable[T], key: Callable[[T], Hashable]) -> List[T]:
    """Drop duplicates by ``key``; the last occurrence wins, first position kept."""
    merged: Dict[Hashable, T] = {}
    for item in items:
        merged[key(item)] = item
    return list(merged.values())


def build_missing_pool(
    creatures: Iterable[Creature],
    partner_dex: Optional[Iterable[int]] = None,
    max_dex: int = MAX_DEX_NUMBER,
) -> List[tuple[Creature, Optional[str]]]:
    """Return ``(creature, needed_by)`` pairs for everything worth scoring.

    Without a partner the pool is the roster's non-lucky creatures and
    ``needed_by`` stays None. With a partner, any dex number lacking a lucky
    for either player is pooled; dex numbers the roster has no name for get a
    placeholder creature.
    """
    roster = list(creatures)
    if partner_dex is None:
        return [(creature, None) for creature in roster if not creature.is_lucky]

    partner_lucky = set(partner_dex)
    by_dex: Dict[int, Creature] = {}
    for creature in roster:
        by_dex.setdefault(creature.dex_number, creature)
    user_lucky = {dex for dex, creature in by_dex.items() if creature.is_lucky}

    pool: List[tuple[Creature, Optional[str]]] = []
    for dex in sorted(set(range(1, max_dex + 1)) | set(by_dex)):
        you_need = dex not in user_lucky
        partner_needs = dex not in partner_lucky
        if not (you_need or partner_needs):
            continue
        if you_need and partner_needs:
            needed_by = NEEDED_BOTH
        elif you_need:
            needed_by = NEEDED_YOU
        else:
            needed_by = NEEDED_PARTNER
        creature = by_dex.get(dex) or Creature(dex_number=dex, name=placeholder_name(dex))
        pool.append((creature, needed_by))
    return pool


class _ScoringPass:
    """Mutable accumulator for a single call to :func:`score_creatures`."""

    def __init__(self, pool: Sequence[tuple[Creature, Optional[str]]]):
        self.index = MissingRosterIndex(creature for creature, _ in pool)
        self.needed_by: Dict[int, Optional[str]] = {
            creature.dex_number: needed for creature, needed in pool
        }
        self.entries: Dict[int, PriorityEntry] = {}
        self._event_keys: set[tuple[str, str, str]] = set()
        self._egg_keys: set[tuple[str, int]] = set()

    def _entry(self, creature: Creature) -> PriorityEntry:
        entry = self.entries.get(creature.dex_number)
        if entry is None:
            entry = PriorityEntry(
                dex_number=creature.dex_number,
                name=creature.name,
                normalized_name=normalize_name(creature.name),
                needed_by=self.needed_by.get(creature.dex_number),
            )
            self.entries[creature.dex_number] = entry
        return entry

    def credit(
        self,
        source_name: str,
        points: int,
        source: PrioritySource,
        *,
        event_id: Optional[str] = None,
        egg_label: Optional[str] = None,
    ) -> bool:
        root = base_name(source_name)
        creature = self.index.lookup(root)
        if creature is None:
            return False
        if event_id is not None:
            event_key = (event_id, normalize_name(root), source.type)
            if event_key in self._event_keys:
                return False
            self._event_keys.add(event_key)
        if egg_label is not None:
            egg_key = (egg_label, creature.dex_number)
            if egg_key in self._egg_keys:
                return False
            self._egg_keys.add(egg_key)
        self._entry(creature).add(points, source)
        return True

    # -- categories -----------------------------------------------------

    def score_raids(self, feeds: FeedBundle) -> None:
        for raid in feeds.raids:
            if not raid.tier:
                continue
            is_shadow = "shadow" in raid.tier.lower() or "shadow" in raid.name.lower()
            if is_shadow:
                label = raid.tier if "shadow" in raid.tier.lower() else f"Shadow {raid.tier}"
                source = PrioritySource(type=SOURCE_SHADOW_RAID, label=label, detail=raid.name)
                self.credit(raid.name, POINTS["shadow_raid"], source)
            else:
                source = PrioritySource(type=SOURCE_RAID, label=raid.tier, detail=raid.name)
                self.credit(raid.name, tier_score(raid.tier), source)

    def score_active_event(self, event: GameEvent) -> None:
        enrichment = event.enrichment
        if not isinstance(enrichment, GenericEnrichment):
            # Legacy raid-battle-only detail never declares spawns.
            return
        if enrichment.has_spawns:
            spawn_names = enrichment.spawns or enrichment.bosses
            for name in spawn_names:
                source = PrioritySource(type=SOURCE_EVENT, label="Event Spawn", detail=event.name)
                self.credit(name, POINTS["event_spawn"], source, event_id=event.event_id)
        for task in enrichment.research:
            for reward in task.rewards:
                source = PrioritySource(
                    type=SOURCE_RESEARCH,
                    label="Event Research",
                    detail=task.task or event.name,
                )
                self.credit(reward, POINTS["event_research"], source, event_id=event.event_id)
        for egg in enrichment.eggs:
            label = egg.egg_distance or "Egg"
            source = PrioritySource(type=SOURCE_EGG, label=label, detail=event.name)
            self.credit(
                egg.name,
                POINTS["event_egg"],
                source,
                event_id=event.event_id,
                egg_label=label,
            )

    def score_upcoming_event(self, event: GameEvent) -> None:
        enrichment = event.enrichment
        if isinstance(enrichment, GenericEnrichment) and enrichment.spawns:
            names = enrichment.spawns
        else:
            names = event.boss_names
        source_type = SOURCE_UPCOMING_RAID if is_raid_event(event) else SOURCE_UPCOMING
        availability = format_availability(event)
        for name in names:
            source = PrioritySource(
                type=source_type,
                label="Upcoming",
                detail=event.name,
                availability=availability,
                link=event.link or None,
            )
            self.credit(name, POINTS["upcoming"], source, event_id=event.event_id)

    def score_research(self, feeds: FeedBundle) -> None:
        for task in feeds.research:
            for reward in task.rewards:
                source = PrioritySource(type=SOURCE_RESEARCH, label="Research", detail=task.text)
                self.credit(reward, POINTS["research"], source)

    def score_eggs(self, feeds: FeedBundle) -> None:
        for egg in feeds.eggs:
            label = egg.egg_type or "Egg"
            source = PrioritySource(type=SOURCE_EGG, label=label, detail=egg.name)
            self.credit(egg.name, POINTS["egg"], source, egg_label=label)

    def score_rockets(self, feeds: FeedBundle) -> None:
        for lineup in feeds.rockets:
            encounters = [slot for slot in lineup.all_slots if slot.is_encounter]
            unique: List[RocketSlot] = _dedupe_by_key(encounters, lambda slot: normalize_name(slot.name))
            if lineup.is_leader:
                points = POINTS["rocket_leader"]
                label = lineup.name
            else:
                points = POINTS["rocket_grunt"]
                label = f"Rocket {lineup.type or 'Grunt'}"
            for slot in unique:
                source = PrioritySource(
                    type=SOURCE_ROCKET,
                    label=label,
                    detail=f"{lineup.title}: {lineup.name}",
                )
                self.credit(slot.name, points, source)


def _sort_entries(entries: List[PriorityEntry], with_partner: bool) -> List[PriorityEntry]:
    if not with_partner:
        return sorted(entries, key=lambda entry: -entry.score)
    return sorted(
        entries,
        key=lambda entry: (-entry.score, NEEDED_BY_RANK.get(entry.needed_by, 1), entry.name),
    )


def score_creatures(
    creatures: Iterable[Creature],
    feeds: FeedBundle,
    *,
    partner_dex: Optional[Iterable[int]] = None,
    include_upcoming: bool = True,
    now: Optional[datetime] = None,
    max_dex: int = MAX_DEX_NUMBER,
    upcoming_days: int = DEFAULT_UPCOMING_DAYS,
) -> List[PriorityEntry]:
    """Rank the roster's missing creatures by current availability.

    ``creatures`` may be a :class:`~models.creature.Roster` or any iterable of
    creatures; it is never mutated. When ``partner_dex`` is given each entry is
    tagged with who needs it and ties sort ``both`` first, ``partner`` last,
    then by name.
    """
    now = now or utcnow()
    with_partner = partner_dex is not None
    pool = build_missing_pool(creatures, partner_dex, max_dex=max_dex)
    scoring = _ScoringPass(pool)

    scoring.score_raids(feeds)
    windows = partition_events(feeds.events, now, upcoming_horizon(now, upcoming_days))
    for event in windows.active:
        scoring.score_active_event(event)
    if include_upcoming:
        for event in windows.upcoming:
            scoring.score_upcoming_event(event)
    scoring.score_research(feeds)
    scoring.score_eggs(feeds)
    scoring.score_rockets(feeds)

    ranked = _sort_entries(
        [entry for entry in scoring.entries.values() if entry.score > 0],
        with_partner,
    )
    _LOG.debug(
        "Scored %s of %s pooled creatures (%s active, %s upcoming events).",
        len(ranked),
        len(pool),
        len(windows.active),
        len(windows.upcoming),
    )
    return ranked
