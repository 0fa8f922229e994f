"""Centralized JSON error handlers."""

from __future__ import annotations

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from shared.exceptions import AppError, FeedError, NotFoundError, ValidationError

_LOG = logging.getLogger(__name__)


def _json_error(code: str, detail: str, status: int):
    payload = {"error": code, "detail": detail}
    return jsonify(payload), status


def register_error_handlers(app) -> None:
    """Register error handlers on the Flask app."""

    @app.errorhandler(ValidationError)
    def bad_request(err):  # type: ignore[no-redef]
        return _json_error("invalid_request", str(err) or "Invalid request.", 400)

    @app.errorhandler(NotFoundError)
    def missing(err):  # type: ignore[no-redef]
        return _json_error("not_found", str(err) or "Resource not found.", 404)

    @app.errorhandler(FeedError)
    def upstream(err):  # type: ignore[no-redef]
        _LOG.warning("Upstream feed error: %s", err)
        return _json_error("feed_unavailable", str(err) or "Feed unavailable.", 502)

    @app.errorhandler(AppError)
    def app_error(err):  # type: ignore[no-redef]
        _LOG.exception("Unhandled application error")
        return _json_error("server_error", "A server error occurred.", 500)

    @app.errorhandler(HTTPException)
    def http_error(err):  # type: ignore[no-redef]
        code = (err.name or "error").lower().replace(" ", "_")
        return _json_error(code, err.description or err.name, err.code or 500)
