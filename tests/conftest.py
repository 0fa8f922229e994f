import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT_DIR / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

os.environ["FLASK_ENV"] = "testing"

import pytest  # noqa: E402

from config import load_config  # noqa: E402
from models.creature import Creature  # noqa: E402
from models.feeds import FeedBundle  # noqa: E402
from services.feed_client import FeedCache  # noqa: E402
from services.pokedex_catalog import PokedexCatalog  # noqa: E402


def _raid(name, tier="3-Star Raids"):
    return {"name": name, "tier": tier, "canBeShiny": False}


@pytest.fixture
def starter_roster():
    return [
        Creature(dex_number=1, name="Bulbasaur", is_lucky=False),
        Creature(dex_number=2, name="Ivysaur", is_lucky=False),
        Creature(dex_number=3, name="Venusaur", is_lucky=True),
    ]


@pytest.fixture
def starter_raids():
    return FeedBundle.from_payload(
        {"raids": [_raid("Bulbasaur"), _raid("Ivysaur"), _raid("Venusaur")]}
    )


@pytest.fixture
def feed_payload():
    return {
        "events": [],
        "raids": [_raid("Bulbasaur"), _raid("Ivysaur"), _raid("Venusaur")],
        "research": [],
        "eggs": [],
        "rockets": [],
    }


@pytest.fixture
def app(feed_payload):
    from app import create_app

    bundle = FeedBundle.from_payload(feed_payload)
    feed_cache = FeedCache(lambda: bundle, ttl_seconds=0)
    catalog = PokedexCatalog(lambda: {1: "Bulbasaur", 2: "Ivysaur", 3: "Venusaur"})
    flask_app = create_app(config=load_config(), feed_cache=feed_cache, catalog=catalog)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
