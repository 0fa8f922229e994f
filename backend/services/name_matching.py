"""Creature-name normalization and loose matching across feeds.

Feeds name forms inconsistently ("Alolan Vulpix", "Vulpix (Alolan)",
"Mr. Mime") while a player's roster carries plain species names. Matching is a
two-step heuristic: strip a known form prefix or parenthetical qualifier, then
compare normalized keys, falling back to substring containment.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, List, Optional

from models.creature import Creature

__all__ = [
    "FORM_PREFIXES",
    "MissingRosterIndex",
    "base_name",
    "build_index",
    "names_match",
    "normalize_name",
]

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_PAREN_FORM_RE = re.compile(r"^(.+?)\s*\(")

# Order matters: the first prefix that matches wins.
FORM_PREFIXES: tuple[str, ...] = (
    "alolan",
    "galarian",
    "hisuian",
    "paldean",
    "mega",
    "shadow",
    "normal",
    "attack",
    "defense",
    "speed",
    "origin",
    "altered",
    "therian",
    "incarnate",
    "black",
    "white",
    "primal",
)


def normalize_name(name: str | None) -> str:
    """Lowercase and drop everything outside ``[a-z0-9]``."""
    return _NON_ALNUM_RE.sub("", (name or "").lower()).strip()


def base_name(name: str | None) -> str:
    """Return the species root of a form name.

    >>> base_name("Alolan Vulpix")
    'Vulpix'
    >>> base_name("Deoxys (Attack Forme)")
    'Deoxys'
    """
    text = name or ""
    lower = text.lower().strip()
    for prefix in FORM_PREFIXES:
        if lower.startswith(prefix + " "):
            return text.strip()[len(prefix) + 1:].strip()
    paren = _PAREN_FORM_RE.match(text)
    if paren:
        return paren.group(1).strip()
    return text.strip()


def names_match(candidate_name: str, source_name: str) -> bool:
    """Loose equality: exact normalized match or containment either way."""
    candidate = normalize_name(candidate_name)
    source = normalize_name(source_name)
    if not candidate or not source:
        return False
    if candidate == source:
        return True
    return candidate in source or source in candidate


class MissingRosterIndex:
    """Lookup from a feed name to the roster creature it denotes.

    Exact normalized names resolve through a dict; anything else falls back to
    a linear :func:`names_match` scan in roster order.
    """

    def __init__(self, creatures: Iterable[Creature]):
        self._creatures: List[Creature] = list(creatures)
        self._exact: Dict[str, Creature] = {}
        for creature in self._creatures:
            self._exact.setdefault(normalize_name(creature.name), creature)

    def __len__(self) -> int:
        return len(self._creatures)

    def lookup(self, source_name: str) -> Optional[Creature]:
        key = normalize_name(source_name)
        if not key:
            return None
        hit = self._exact.get(key)
        if hit is not None:
            return hit
        for creature in self._creatures:
            if names_match(creature.name, source_name):
                return creature
        return None

    __call__ = lookup


def build_index(creatures: Iterable[Creature]) -> Callable[[str], Optional[Creature]]:
    return MissingRosterIndex(creatures)
