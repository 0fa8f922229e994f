"""Plain dataclass models for rosters, feed records and scorer output.

Usage:
    from models import Creature, Roster, FeedBundle, PriorityEntry
"""
from __future__ import annotations

from .creature import DEFAULT_PARTNER_NAME, Creature, PartnerRoster, Roster
from .feeds import (
    EggEntry,
    EventEgg,
    EventResearchTask,
    FeedBundle,
    GameEvent,
    GenericEnrichment,
    RaidBattlesEnrichment,
    RaidBoss,
    ResearchTask,
    RocketLineup,
    RocketSlot,
)
from .priority import PriorityEntry, PrioritySource

__all__ = [
    "Creature",
    "DEFAULT_PARTNER_NAME",
    "EggEntry",
    "EventEgg",
    "EventResearchTask",
    "FeedBundle",
    "GameEvent",
    "GenericEnrichment",
    "PartnerRoster",
    "PriorityEntry",
    "PrioritySource",
    "RaidBattlesEnrichment",
    "RaidBoss",
    "ResearchTask",
    "RocketLineup",
    "RocketSlot",
    "Roster",
]
