"""Validation and serialization of a partner's lucky dex set."""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, List, Optional

from models.creature import DEFAULT_PARTNER_NAME, PartnerRoster
from services.lucky_share import MAX_DEX_NUMBER
from utils.time import utcnow


def _clamp(value: int, max_dex: int) -> int:
    return max(1, min(max_dex, value))


def normalize_partner_dex_numbers(values: Any, max_dex: int = MAX_DEX_NUMBER) -> Optional[List[int]]:
    """Sorted, de-duplicated, clamped dex numbers; None for malformed input."""
    if not isinstance(values, (list, tuple, set, frozenset)):
        return None
    deduped: set[int] = set()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
        deduped.add(_clamp(int(value), max_dex))
    return sorted(deduped)


def build_partner_dex_data(
    dex: Iterable[int],
    name: str | None = DEFAULT_PARTNER_NAME,
    max_dex: int = MAX_DEX_NUMBER,
) -> PartnerRoster:
    normalized = normalize_partner_dex_numbers(list(dex), max_dex) or []
    return PartnerRoster(
        name=(name or "").strip() or DEFAULT_PARTNER_NAME,
        lucky_dex_numbers=frozenset(normalized),
        updated_at=utcnow().isoformat(),
    )


def parse_partner_dex_data(raw: str | bytes | None, max_dex: int = MAX_DEX_NUMBER) -> Optional[PartnerRoster]:
    """Parse stored partner JSON; anything malformed yields None."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, dict):
        return None
    dex = normalize_partner_dex_numbers(parsed.get("dex"), max_dex)
    if dex is None:
        return None
    name = parsed.get("name")
    updated_at = parsed.get("updatedAt")
    return PartnerRoster(
        name=name.strip() if isinstance(name, str) and name.strip() else DEFAULT_PARTNER_NAME,
        lucky_dex_numbers=frozenset(dex),
        updated_at=updated_at if isinstance(updated_at, str) and updated_at else utcnow().isoformat(),
    )


def dump_partner_dex_data(partner: PartnerRoster) -> str:
    return json.dumps(partner.to_dict(), separators=(",", ":"))


__all__ = [
    "build_partner_dex_data",
    "dump_partner_dex_data",
    "normalize_partner_dex_numbers",
    "parse_partner_dex_data",
]
