"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from scholarhub.api.deps import json_response, timing
from scholarhub.core import extensions
from scholarhub.core.extensions import db

bp = Blueprint("health", __name__)


def _check_db() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        return "fail"
    return "ok"


def _check_redis() -> str:
    if extensions.redis_client is None:
        return "memory"
    try:
        extensions.redis_client.ping()
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        return "fail"
    return "ok"


def _check_search() -> str:
    if extensions.search_client is None:
        return "memory"
    # Search is best-effort; a down cluster degrades but does not fail health.
    return "ok" if extensions.search_client.ping() else "degraded"


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database, revocation store and search health."""

    db_status = _check_db()
    redis_status = _check_redis()
    payload = {
        "status": "ok" if "fail" not in (db_status, redis_status) else "fail",
        "db": db_status,
        "redis": redis_status,
        "search": _check_search(),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload, status=200 if payload["status"] == "ok" else 503)
