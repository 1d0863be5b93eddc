"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from elasticsearch import Elasticsearch
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
redis_client: redis.Redis | None = None
search_client: Elasticsearch | None = None


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT, Redis and Elasticsearch clients.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`scholarhub.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    Redis backs token revocation, so an unreachable server aborts startup.
    Elasticsearch only backs the best-effort search index: an unreachable
    cluster is logged and the client is kept for later calls.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from scholarhub import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    _init_redis(app)
    _init_search(app)


def _init_redis(app: Flask) -> None:
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def _init_search(app: Flask) -> None:
    global search_client
    es_url = app.config.get("ELASTICSEARCH_URL")
    if not es_url:
        search_client = None
        app.extensions.pop("search_client", None)
        return

    api_key = app.config.get("ELASTICSEARCH_API_KEY")
    timeout = app.config.get("SEARCH_REQUEST_TIMEOUT", 10)
    if api_key:
        search_client = Elasticsearch(es_url, api_key=api_key, request_timeout=timeout)
    else:
        search_client = Elasticsearch(es_url, request_timeout=timeout)
    if not search_client.ping():
        log.warning("Elasticsearch at %s is not reachable; search sync will fail until it is", es_url)
    app.extensions["search_client"] = search_client


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client


def get_search_client() -> Elasticsearch:
    """Return the initialized Elasticsearch client."""
    if search_client is None:
        raise RuntimeError("Elasticsearch client is not initialized. Call init_app() first.")
    return search_client
