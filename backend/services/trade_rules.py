"""Trade annotations for raid bosses a player still needs.

Pure lookups: nothing here feeds back into scoring.
"""

from __future__ import annotations

from typing import Optional

from services.name_matching import base_name, normalize_name

NOTE_UNTRADEABLE = "Can't Trade (Mythical)"
NOTE_PURIFY_SPECIAL_TRADE = "Purify + Special Trade"
NOTE_SPECIAL_TRADE = "Special Trade"

# Normalized base names that cannot be traded in any form.
UNTRADEABLE_SPECIES = frozenset(
    {
        "mew",
        "celebi",
        "jirachi",
        "deoxys",
        "phione",
        "manaphy",
        "darkrai",
        "shaymin",
        "arceus",
        "victini",
        "keldeo",
        "meloetta",
        "genesect",
        "diancie",
        "hoopa",
        "volcanion",
        "magearna",
        "marshadow",
        "zeraora",
        "zarude",
        "pecharunt",
    }
)

MYTHICAL_DEX = frozenset(
    {
        151, 251, 385, 386, 489, 490, 491, 492, 493, 494,
        647, 648, 649, 719, 720, 721, 801, 802, 807, 808,
        809, 893, 1025,
    }
)

LEGENDARY_OR_MYTHICAL_DEX = frozenset(
    {
        144, 145, 146, 150, 151,
        243, 244, 245, 249, 250, 251,
        377, 378, 379, 380, 381, 382, 383, 384, 385, 386,
        480, 481, 482, 483, 484, 485, 486, 487, 488, 489, 490, 491, 492, 493,
        494, 638, 639, 640, 641, 642, 643, 644, 645, 646, 647, 648, 649,
        716, 717, 718, 719, 720, 721,
        772, 773, 785, 786, 787, 788, 789, 790, 791, 792,
        793, 794, 795, 796, 797, 798, 799, 800, 801, 802, 803, 804, 805, 806,
        807, 808, 809, 888, 889, 890, 891, 892, 893, 894, 895, 896, 897, 898,
        905, 1001, 1002, 1003, 1004, 1007, 1008, 1017, 1024, 1025,
    }
)


def is_mythical_dex(dex_number: int) -> bool:
    return dex_number in MYTHICAL_DEX


def is_legendary_dex(dex_number: int) -> bool:
    return dex_number in LEGENDARY_OR_MYTHICAL_DEX and dex_number not in MYTHICAL_DEX


def is_legendary_tier(tier: str | None) -> bool:
    normalized = (tier or "").lower()
    return (
        "5-star" in normalized
        or "5 star" in normalized
        or normalized.startswith("5")
        or "elite" in normalized
    )


def is_untradeable(name: str | None) -> bool:
    return normalize_name(base_name(name)) in UNTRADEABLE_SPECIES


def raid_trade_note(name: str, tier: str, is_shadow: bool, is_needed: bool) -> Optional[str]:
    """Return the trade caveat to show beside a needed raid boss, if any."""
    if not is_needed:
        return None
    if is_untradeable(name):
        return NOTE_UNTRADEABLE
    # Shadows must be purified first; the purified trade is then special.
    if is_shadow:
        return NOTE_PURIFY_SPECIAL_TRADE
    if is_legendary_tier(tier):
        return NOTE_SPECIAL_TRADE
    return None


__all__ = [
    "LEGENDARY_OR_MYTHICAL_DEX",
    "MYTHICAL_DEX",
    "NOTE_PURIFY_SPECIAL_TRADE",
    "NOTE_SPECIAL_TRADE",
    "NOTE_UNTRADEABLE",
    "UNTRADEABLE_SPECIES",
    "is_legendary_dex",
    "is_legendary_tier",
    "is_mythical_dex",
    "is_untradeable",
    "raid_trade_note",
]
