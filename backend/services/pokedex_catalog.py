"""Dex-number to display-name catalog, used to rebuild a roster from a share link."""
from __future__ import annotations

import logging
import re
import threading
from typing import Any, Callable, Dict, Iterable, Optional

import requests

from models.creature import Creature, Roster
from services.lucky_share import MAX_DEX_NUMBER
from services.priority_scorer import placeholder_name
from shared.exceptions import FeedError

_LOG = logging.getLogger(__name__)

_SPECIES_URL_RE = re.compile(r"/pokemon-species/(\d+)/?$")


def dex_from_species_url(url: str | None) -> Optional[int]:
    match = _SPECIES_URL_RE.search(url or "")
    if not match:
        return None
    return int(match.group(1))


def format_species_name(slug: str) -> str:
    """``"mr-mime"`` -> ``"Mr Mime"``."""
    return " ".join(part[:1].upper() + part[1:] for part in slug.split("-"))


def parse_species_list(payload: Any) -> Dict[int, str]:
    names: Dict[int, str] = {}
    results = payload.get("results") if isinstance(payload, dict) else None
    for species in results or []:
        if not isinstance(species, dict):
            continue
        dex_number = dex_from_species_url(species.get("url"))
        slug = species.get("name")
        if not dex_number or not slug:
            continue
        names[dex_number] = format_species_name(str(slug))
    return names


def fetch_species_names(url: str, *, timeout: float = 10.0) -> Dict[int, str]:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise FeedError(f"Failed to fetch Pokedex species: {exc}") from exc
    if response.status_code != 200:
        raise FeedError(f"Failed to fetch Pokedex species: {response.status_code}")
    try:
        names = parse_species_list(response.json())
    except ValueError as exc:
        raise FeedError("Pokedex species response is not valid JSON") from exc
    if not names:
        raise FeedError("No species returned from PokeAPI")
    return names


class PokedexCatalog:
    """Lazily loaded name map with explicit invalidation."""

    def __init__(self, loader: Callable[[], Dict[int, str]]):
        self._loader = loader
        self._lock = threading.Lock()
        self._names: Optional[Dict[int, str]] = None

    def get(self) -> Dict[int, str]:
        with self._lock:
            if self._names is None:
                self._names = dict(self._loader())
                _LOG.info("Loaded %s species names", len(self._names))
            return self._names

    def refresh(self) -> Dict[int, str]:
        self.invalidate()
        return self.get()

    def invalidate(self) -> None:
        with self._lock:
            self._names = None

    @classmethod
    def from_config(cls, config) -> "PokedexCatalog":
        return cls(lambda: fetch_species_names(config.pokeapi_url, timeout=config.http_timeout))


def build_roster_from_lucky_dex(
    lucky_dex: Iterable[int],
    max_dex: int = MAX_DEX_NUMBER,
    names: Optional[Dict[int, str]] = None,
) -> Roster:
    """Full 1..max_dex roster with lucky flags taken from ``lucky_dex``."""
    lucky = set(lucky_dex)
    names = names or {}
    return Roster.build(
        Creature(
            dex_number=dex_number,
            name=names.get(dex_number) or placeholder_name(dex_number),
            is_lucky=dex_number in lucky,
        )
        for dex_number in range(1, max_dex + 1)
    )


__all__ = [
    "PokedexCatalog",
    "build_roster_from_lucky_dex",
    "dex_from_species_url",
    "fetch_species_names",
    "format_species_name",
    "parse_species_list",
]
