"""
scholarhub.infra
================

Concrete adapters for the service-layer ports, and the per-app wiring that
builds application services on top of them.

- :mod:`.jwt.flask_jwt_token_provider`: signed tokens via Flask-JWT-Extended.
- :mod:`.redis.redis_revocation_store`: revocation and reset entries in Redis.
- :mod:`.search.elasticsearch_index`: publication documents in Elasticsearch.
- :mod:`.tasks.thread_pool`: bounded background runner for index sync.

When ``ELASTICSEARCH_URL`` is unset the in-memory search index is used.
Without ``REDIS_URL`` the in-memory revocation store is only accepted in
debug or testing mode; any other app refuses to start.
"""

from __future__ import annotations

import atexit
import logging
from dataclasses import dataclass

from flask import Flask, current_app

from scholarhub.core import extensions
from scholarhub.services._shared.ports import (
    InlineTaskRunner,
    InMemoryRevocationStore,
    InMemorySearchIndex,
    RevocationStore,
    SearchIndex,
    TaskRunner,
    TokenProvider,
)
from scholarhub.services.auth.dto import AuthTokenConfig
from scholarhub.services.auth.password_reset import PasswordResetService
from scholarhub.services.auth.service import AuthService
from scholarhub.services.identity.service import IdentityService
from scholarhub.services.publications.service import PublicationService
from scholarhub.services.search.service import SearchSynchronizer

log = logging.getLogger(__name__)

EXTENSION_KEY = "scholarhub.container"


@dataclass(slots=True)
class Container:
    """Adapters and services bound to one Flask application."""

    token_provider: TokenProvider
    revocation_store: RevocationStore
    search_index: SearchIndex
    task_runner: TaskRunner
    auth: AuthService
    password_reset: PasswordResetService
    identity: IdentityService
    search: SearchSynchronizer
    publications: PublicationService


def _build_revocation_store(app: Flask) -> RevocationStore:
    if extensions.redis_client is None:
        if not (app.debug or app.testing):
            # Every worker must see every logout and reset consumption.
            raise RuntimeError(
                "REDIS_URL is required outside development and testing; "
                "a process-local revocation store is not shared between workers."
            )
        log.warning("REDIS_URL not set; using a process-local revocation store")
        return InMemoryRevocationStore()
    from scholarhub.infra.redis.redis_revocation_store import RedisRevocationStore

    return RedisRevocationStore(extensions.get_redis())


def _build_search_index(app: Flask) -> SearchIndex:
    if extensions.search_client is None:
        log.warning("ELASTICSEARCH_URL not set; using an in-memory search index")
        return InMemorySearchIndex()
    from scholarhub.infra.search.elasticsearch_index import ElasticsearchIndex

    return ElasticsearchIndex(
        client=extensions.get_search_client(),
        index_name=app.config.get("SEARCH_INDEX", "publications"),
    )


def _build_task_runner(app: Flask) -> TaskRunner:
    mode = str(app.config.get("SEARCH_SYNC_MODE", "thread")).lower()
    if mode == "inline":
        return InlineTaskRunner()
    if mode != "thread":
        raise RuntimeError(f"Unknown SEARCH_SYNC_MODE {mode!r}")

    from scholarhub.infra.tasks.thread_pool import ThreadPoolTaskRunner

    runner = ThreadPoolTaskRunner(
        max_workers=int(app.config.get("SEARCH_SYNC_WORKERS", 4)),
        max_pending=int(app.config.get("SEARCH_SYNC_QUEUE_SIZE", 256)),
    )
    atexit.register(runner.shutdown, wait=True)
    return runner


def build_container(
    app: Flask,
    *,
    token_provider: TokenProvider | None = None,
    revocation_store: RevocationStore | None = None,
    search_index: SearchIndex | None = None,
    task_runner: TaskRunner | None = None,
) -> Container:
    """
    Build every adapter and service for ``app``.

    Keyword overrides replace the configured adapter, which lets tests
    inject stubs or a deferred runner.
    """
    if token_provider is None:
        from scholarhub.infra.jwt.flask_jwt_token_provider import FlaskJWTTokenProvider

        token_provider = FlaskJWTTokenProvider()
    store = revocation_store or _build_revocation_store(app)
    index = search_index or _build_search_index(app)
    runner = task_runner or _build_task_runner(app)

    token_cfg = AuthTokenConfig(
        session_expires=app.config["SESSION_TOKEN_TTL"],
        reset_expires=app.config["PASSWORD_RESET_TOKEN_TTL"],
    )
    search = SearchSynchronizer(index=index, runner=runner)
    return Container(
        token_provider=token_provider,
        revocation_store=store,
        search_index=index,
        task_runner=runner,
        auth=AuthService(
            token_provider=token_provider, revocation_store=store, token_cfg=token_cfg
        ),
        password_reset=PasswordResetService(
            token_provider=token_provider,
            revocation_store=store,
            token_cfg=token_cfg,
            expose_token=bool(app.config.get("PASSWORD_RESET_EXPOSE_TOKEN", False)),
        ),
        identity=IdentityService(),
        search=search,
        publications=PublicationService(synchronizer=search),
    )


def init_app(app: Flask, **overrides) -> Container:
    """Build the container and attach it to ``app.extensions``."""
    container = build_container(app, **overrides)
    app.extensions[EXTENSION_KEY] = container
    return container


def get_container() -> Container:
    """Return the container of the current application."""
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("Services are not initialized. Call infra.init_app() first.") from None


__all__ = ["Container", "build_container", "init_app", "get_container"]
