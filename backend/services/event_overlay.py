"""Merge scraped event-detail enrichment into the raw event feed.

The event feed often ships without spawn/egg/research detail; a separate
scrape of each event page fills it in. Both sides are raw JSON mappings keyed
like the feed (``extraData.generic`` and ``extraData.raidbattles``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional


def _section(event: Mapping[str, Any], key: str) -> Dict[str, Any]:
    extra = event.get("extraData")
    if not isinstance(extra, dict):
        return {}
    section = extra.get(key)
    return section if isinstance(section, dict) else {}


def _has_items(section: Mapping[str, Any], key: str) -> bool:
    value = section.get(key)
    return isinstance(value, list) and len(value) > 0


def has_generic_enrichment(event: Mapping[str, Any]) -> bool:
    generic = _section(event, "generic")
    return any(_has_items(generic, key) for key in ("spawns", "eventEggs", "eventResearch"))


def has_raid_boss_enrichment(event: Mapping[str, Any]) -> bool:
    return _has_items(_section(event, "raidbattles"), "bosses")


def should_include_overlay_event(event: Mapping[str, Any]) -> bool:
    return has_generic_enrichment(event) or has_raid_boss_enrichment(event)


def merge_event_enrichment(
    events: List[Dict[str, Any]],
    overlay: Optional[Mapping[str, Mapping[str, Any]]],
) -> List[Dict[str, Any]]:
    """Return new event payloads with overlay detail applied by ``eventID``.

    Overlay ``generic`` keys win over the event's own. The overlay's raid
    bosses are used only when the event lists none itself.
    """
    if overlay is None:
        return events
    merged: List[Dict[str, Any]] = []
    for event in events:
        enriched = overlay.get(str(event.get("eventID") or ""))
        if not enriched:
            merged.append(event)
            continue
        extra = dict(event.get("extraData") or {})
        extra["generic"] = {**_section(event, "generic"), **(enriched.get("generic") or {})}
        overlay_raids = enriched.get("raidbattles")
        if overlay_raids and not has_raid_boss_enrichment(event):
            extra["raidbattles"] = overlay_raids
        merged.append({**event, "extraData": extra})
    return merged


__all__ = [
    "has_generic_enrichment",
    "has_raid_boss_enrichment",
    "merge_event_enrichment",
    "should_include_overlay_event",
]
