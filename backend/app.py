"""Flask application factory, JSON API and CLI entry points."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import click
from dotenv import load_dotenv
from flask import Flask, current_app, jsonify, request
from flask.cli import with_appcontext

from config import AppConfig, load_config
from models.creature import Creature
from models.feeds import FeedBundle
from services.categories import categorize_priorities
from services.feed_client import FeedCache
from services.lucky_share import build_share_query, verify_share_query
from services.partner_dex import build_partner_dex_data, normalize_partner_dex_numbers
from services.pokedex_catalog import PokedexCatalog, build_roster_from_lucky_dex
from services.priority_scorer import score_creatures
from services.trade_rules import raid_trade_note
from shared.error_handlers import register_error_handlers
from shared.exceptions import FeedError, ValidationError
from shared.logging_config import configure_logging
from utils.time import parse_timestamp

_LOG = logging.getLogger(__name__)

FEED_CACHE_KEY = "luckydex.feeds"
CATALOG_KEY = "luckydex.catalog"
CONFIG_KEY = "luckydex.config"


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object body.")
    return payload


def _parse_roster(raw: Any) -> List[Creature]:
    if not isinstance(raw, list):
        raise ValidationError("'roster' must be a list of creatures.")
    creatures: List[Creature] = []
    seen: set[int] = set()
    for item in raw:
        creature = Creature.from_payload(item)
        if creature is None:
            raise ValidationError(f"Invalid roster entry: {item!r}")
        if creature.dex_number in seen:
            continue
        seen.add(creature.dex_number)
        creatures.append(creature)
    return creatures


def _parse_partner_dex(raw: Any, max_dex: int) -> Optional[List[int]]:
    if raw is None:
        return None
    dex = normalize_partner_dex_numbers(raw, max_dex)
    if dex is None:
        raise ValidationError("'partner_dex' must be a list of dex numbers.")
    return dex


def _feed_cache() -> FeedCache:
    return current_app.extensions[FEED_CACHE_KEY]


@click.command("refresh-feeds")
@with_appcontext
def refresh_feeds_command():
    """Re-fetch the availability feeds and print record counts."""
    try:
        bundle = _feed_cache().refresh()
    except FeedError as exc:
        raise click.ClickException(str(exc)) from exc
    for name, count in bundle.counts().items():
        click.echo(f"{name}: {count}")


def create_app(
    config: AppConfig | None = None,
    feed_cache: FeedCache | None = None,
    catalog: PokedexCatalog | None = None,
) -> Flask:
    load_dotenv()
    config = config or load_config()
    app = Flask(__name__)
    app.config.update(config.to_flask())
    app.config["TESTING"] = config.testing
    if not config.testing:
        configure_logging(app, config.log_level)

    app.extensions[CONFIG_KEY] = config
    app.extensions[FEED_CACHE_KEY] = feed_cache or FeedCache.from_config(config)
    app.extensions[CATALOG_KEY] = catalog or PokedexCatalog.from_config(config)
    register_error_handlers(app)
    app.cli.add_command(refresh_feeds_command)

    @app.get("/healthz")
    def healthz():
        return jsonify(
            status="ok",
            service=config.service_name,
            feeds_loaded=_feed_cache().is_loaded,
        )

    @app.post("/v1/priorities")
    def priorities():
        payload = _json_body()
        creatures = _parse_roster(payload.get("roster"))
        partner_dex = _parse_partner_dex(payload.get("partner_dex"), config.max_dex)
        include_upcoming = payload.get("include_upcoming", True)
        if not isinstance(include_upcoming, bool):
            raise ValidationError("'include_upcoming' must be a boolean.")
        now = None
        if payload.get("now"):
            now = parse_timestamp(str(payload["now"]))
            if now is None:
                raise ValidationError("'now' must be an ISO-8601 timestamp.")
        if "feeds" in payload:
            feeds = FeedBundle.from_payload(payload.get("feeds"))
        else:
            feeds = _feed_cache().get()

        ranked = score_creatures(
            creatures,
            feeds,
            partner_dex=partner_dex,
            include_upcoming=include_upcoming,
            now=now,
            max_dex=config.max_dex,
            upcoming_days=config.upcoming_days,
        )
        categories = categorize_priorities(ranked)
        return jsonify(
            priorities=[entry.to_dict() for entry in ranked],
            categories={
                name: [item.to_dict() for item in items]
                for name, items in categories.items()
            },
            partner=partner_dex is not None,
        )

    @app.post("/v1/share")
    def share():
        payload = _json_body()
        creatures = _parse_roster(payload.get("roster"))
        return jsonify(build_share_query(creatures, config.max_dex))

    @app.get("/v1/share/verify")
    def share_verify():
        result = verify_share_query(
            request.args.get("dex"),
            request.args.get("dexsum"),
            request.args.get("dexcount"),
            max_dex=config.max_dex,
        )
        body = jsonify(status=result.status, lucky_dex=sorted(result.lucky_dex))
        return (body, 200) if result.ok else (body, 400)

    @app.get("/v1/share/roster")
    def share_roster():
        result = verify_share_query(
            request.args.get("dex"),
            request.args.get("dexsum"),
            request.args.get("dexcount"),
            max_dex=config.max_dex,
        )
        if not result.ok:
            return jsonify(status=result.status), 400
        try:
            names = current_app.extensions[CATALOG_KEY].get()
        except FeedError as exc:
            _LOG.warning("Species catalog unavailable, using placeholder names: %s", exc)
            names = {}
        roster = build_roster_from_lucky_dex(result.lucky_dex, config.max_dex, names)
        return jsonify(status=result.status, **roster.to_dict())

    @app.post("/v1/partner")
    def partner():
        payload = _json_body()
        link = payload.get("share")
        if isinstance(link, dict):
            result = verify_share_query(
                link.get("dex"), link.get("dexsum"), link.get("dexcount"), max_dex=config.max_dex
            )
            if not result.ok:
                return jsonify(status=result.status), 400
            dex = sorted(result.lucky_dex)
        else:
            dex = _parse_partner_dex(payload.get("dex"), config.max_dex)
            if dex is None:
                raise ValidationError("Provide 'dex' or 'share'.")
        partner_roster = build_partner_dex_data(dex, payload.get("name"), config.max_dex)
        return jsonify(partner_roster.to_dict())

    @app.post("/v1/trade-note")
    def trade_note():
        payload = _json_body()
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValidationError("'name' is required.")
        note = raid_trade_note(
            name=name,
            tier=str(payload.get("tier") or ""),
            is_shadow=bool(payload.get("is_shadow")),
            is_needed=bool(payload.get("is_needed", True)),
        )
        return jsonify(note=note)

    return app


__all__ = ["create_app", "refresh_feeds_command"]
