from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict

SCRAPEDDUCK_DATA_URL = "https://raw.githubusercontent.com/bigfoott/ScrapedDuck/data"
POKEAPI_SPECIES_URL = "https://pokeapi.co/api/v2/pokemon-species?limit=2000"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class AppConfig:
    service_name: str
    feed_base_url: str
    pokeapi_url: str
    user_agent: str
    http_timeout: float
    feed_cache_ttl: int
    max_dex: int
    upcoming_days: int
    log_level: str
    testing: bool = False

    def to_flask(self) -> Dict[str, Any]:
        """Upper-cased keys for ``app.config.update``."""
        return {f"LUCKYDEX_{key.upper()}": value for key, value in asdict(self).items()}


def load_config() -> AppConfig:
    return AppConfig(
        service_name=os.getenv("SERVICE_NAME", "luckydex"),
        feed_base_url=(os.getenv("LUCKYDEX_FEED_BASE_URL") or SCRAPEDDUCK_DATA_URL).rstrip("/"),
        pokeapi_url=os.getenv("LUCKYDEX_POKEAPI_URL") or POKEAPI_SPECIES_URL,
        user_agent=os.getenv("LUCKYDEX_USER_AGENT", "luckydex/1.0 (+https://localhost)"),
        http_timeout=_env_float("LUCKYDEX_HTTP_TIMEOUT", 10.0),
        feed_cache_ttl=_env_int("LUCKYDEX_FEED_CACHE_TTL", 900),
        max_dex=_env_int("LUCKYDEX_MAX_DEX", 1025),
        upcoming_days=_env_int("LUCKYDEX_UPCOMING_DAYS", 7),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        testing=os.getenv("FLASK_ENV") == "testing",
    )


__all__ = ["AppConfig", "POKEAPI_SPECIES_URL", "SCRAPEDDUCK_DATA_URL", "load_config"]
