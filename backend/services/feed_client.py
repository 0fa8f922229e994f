"""HTTP client and cache for the five availability feeds.

Feeds are ScrapedDuck-style JSON dumps published under one base URL. The
scorer never fetches anything itself: callers resolve a :class:`FeedBundle`
here (usually through a :class:`FeedCache`) and pass it in.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

import requests

from models.feeds import FeedBundle
from shared.exceptions import FeedError

__all__ = [
    "FEED_FILES",
    "FeedCache",
    "fetch_feed_json",
    "fetch_feeds",
]

_LOG = logging.getLogger(__name__)

FEED_FILES: Dict[str, str] = {
    "events": "events.min.json",
    "raids": "raids.min.json",
    "research": "research.min.json",
    "eggs": "eggs.min.json",
    "rockets": "rocketLineups.min.json",
}


def fetch_feed_json(url: str, *, timeout: float = 10.0, user_agent: str | None = None) -> Any:
    headers = {"Accept": "application/json"}
    if user_agent:
        headers["User-Agent"] = user_agent
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        _LOG.warning("Feed request failed for %s: %s", url, exc)
        raise FeedError(f"Failed to fetch {url}: {exc}") from exc
    if response.status_code != 200:
        _LOG.warning("Feed request for %s returned HTTP %s", url, response.status_code)
        raise FeedError(f"Failed to fetch {url}: {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        raise FeedError(f"Feed at {url} is not valid JSON") from exc


def fetch_feeds(base_url: str, *, timeout: float = 10.0, user_agent: str | None = None) -> FeedBundle:
    """Fetch all five feeds; any single failure fails the whole bundle."""
    root = base_url.rstrip("/")
    payload = {
        key: fetch_feed_json(f"{root}/{filename}", timeout=timeout, user_agent=user_agent)
        for key, filename in FEED_FILES.items()
    }
    bundle = FeedBundle.from_payload(payload)
    _LOG.info("Fetched availability feeds", extra={"counts": bundle.counts()})
    return bundle


class FeedCache:
    """Holds one resolved :class:`FeedBundle` for ``ttl_seconds``.

    The loader is injected so tests and offline tooling can supply bundles
    without the network. ``ttl_seconds <= 0`` disables expiry.
    """

    def __init__(
        self,
        loader: Callable[[], FeedBundle],
        ttl_seconds: int = 900,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._bundle: Optional[FeedBundle] = None
        self._loaded_at: float = 0.0

    def _fresh(self) -> bool:
        if self._bundle is None:
            return False
        if self._ttl <= 0:
            return True
        return (self._clock() - self._loaded_at) < self._ttl

    def get(self) -> FeedBundle:
        with self._lock:
            if not self._fresh():
                self._store(self._loader())
            return self._bundle  # type: ignore[return-value]

    def refresh(self) -> FeedBundle:
        with self._lock:
            self._store(self._loader())
            return self._bundle  # type: ignore[return-value]

    def invalidate(self) -> None:
        with self._lock:
            self._bundle = None
            self._loaded_at = 0.0

    def _store(self, bundle: FeedBundle) -> None:
        self._bundle = bundle
        self._loaded_at = self._clock()

    @property
    def is_loaded(self) -> bool:
        return self._bundle is not None

    @classmethod
    def from_config(cls, config) -> "FeedCache":
        def _load() -> FeedBundle:
            return fetch_feeds(
                config.feed_base_url,
                timeout=config.http_timeout,
                user_agent=config.user_agent,
            )

        return cls(_load, ttl_seconds=config.feed_cache_ttl)
