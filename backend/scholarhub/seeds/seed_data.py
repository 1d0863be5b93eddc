"""Deterministic development fixtures for authors and demo accounts."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from scholarhub.models import Author, User

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Authors are never created by the publication write path, so a development
# database needs some before any publication can be saved.
AUTHOR_FIXTURES: list[dict[str, Any]] = [
    {
        "name": "Ada Lovelace",
        "institution": "University of London",
        "email": "ada@example.org",
        "biography": "Analytical engine notes and early algorithms.",
    },
    {
        "name": "Alan Turing",
        "institution": "University of Manchester",
        "email": "alan@example.org",
        "biography": "Computability, morphogenesis and machine intelligence.",
    },
    {
        "name": "Grace Hopper",
        "institution": "Yale University",
        "email": "grace@example.org",
        "website_url": "https://example.org/hopper",
    },
    {
        "name": "Claude Shannon",
        "institution": "MIT",
        "email": "shannon@example.org",
        "biography": "Information theory.",
    },
    {
        "name": "Barbara Liskov",
        "institution": "MIT",
        "email": "liskov@example.org",
    },
]

USER_FIXTURES: list[dict[str, Any]] = [
    {
        "email": "demo@scholarhub.local",
        "username": "demo",
        "password": "demo-password",
        "institution": "ScholarHub",
    },
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_authors(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create the author fixtures, matching existing rows by name."""
    if verbose:
        LOGGER.info("Seeding authors...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        for fixture in AUTHOR_FIXTURES:
            defaults = {k: v for k, v in fixture.items() if k != "name"}
            _, created = _get_or_create(session, Author, name=fixture["name"], defaults=defaults)
            _touch(summary, "authors", created)

    return summary


def seed_users(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create demo accounts; passwords of existing accounts are left alone."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        for fixture in USER_FIXTURES:
            email = str(fixture["email"]).strip().lower()
            user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
            created = user is None
            if user is None:
                session.add(
                    User(
                        email=email,
                        username=fixture["username"],
                        password=fixture["password"],
                        institution=fixture.get("institution"),
                    )
                )
            _touch(summary, "users", created)

    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_users, seed_authors):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = ["seed_authors", "seed_users", "run_all"]
