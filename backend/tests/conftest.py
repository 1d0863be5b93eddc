"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Redis, JWT
signing and Elasticsearch are replaced by the in-memory port doubles.
"""

from __future__ import annotations

import os

import pytest
from scholarhub import infra
from scholarhub.core.config import TestingConfig
from scholarhub.core.extensions import db as _db  # Flask-SQLAlchemy instance
from scholarhub.factory import create_app  # application factory under test
from scholarhub.services._shared.ports import (
    DeferredTaskRunner,
    InlineTaskRunner,
    InMemoryRevocationStore,
    InMemorySearchIndex,
    StubTokenProvider,
)
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Never talks to Redis or Elasticsearch.
    - Runs search synchronization inline so assertions see its effect.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
    REDIS_URL = None
    ELASTICSEARCH_URL = None
    SEARCH_SYNC_MODE = "inline"
    PASSWORD_RESET_EXPOSE_TOKEN = True
    USE_PROXYFIX = False
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. A unit of work that commits
    only releases its own SAVEPOINT; a rollback discards everything the
    session wrote since its last commit, so tests checking atomicity commit
    their fixtures first.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        nonlocal nested
        if not nested.is_active:
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time():
    """Factory returning :func:`freezegun.freeze_time`, anchored at 2024-01-01 by default.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-08 00:00:01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None):
        return _freeze_time(target or "2024-01-01")

    return _factory


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Port doubles --------------------------------------------------------------
@pytest.fixture()
def token_provider() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture()
def revocation_store() -> InMemoryRevocationStore:
    return InMemoryRevocationStore()


@pytest.fixture()
def search_index() -> InMemorySearchIndex:
    return InMemorySearchIndex()


@pytest.fixture()
def runner() -> InlineTaskRunner:
    return InlineTaskRunner()


@pytest.fixture()
def deferred_runner() -> DeferredTaskRunner:
    return DeferredTaskRunner()


# -- HTTP layer ----------------------------------------------------------------
@pytest.fixture()
def container(app, session, revocation_store, search_index, runner):
    """Rebuild the app's services on fresh in-memory adapters for one test.

    The real Flask-JWT-Extended token provider stays in place so API tests
    exercise signing and verification end to end.
    """
    previous = app.extensions.get(infra.EXTENSION_KEY)
    built = infra.init_app(
        app,
        revocation_store=revocation_store,
        search_index=search_index,
        task_runner=runner,
    )
    yield built
    if previous is not None:
        app.extensions[infra.EXTENSION_KEY] = previous


@pytest.fixture()
def client(app, container):
    """Flask test client bound to the per-test service container."""
    return app.test_client()
