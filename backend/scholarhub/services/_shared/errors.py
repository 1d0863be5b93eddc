"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never depend on Flask or
HTTP. The translation to RFC 7807 responses happens in
``scholarhub/core/errors.py`` via :func:`scholarhub.services._shared.base.translate_service_error`.

Each class is a distinct failure kind so callers can map them to different
responses: caller-fixable input (:class:`ValidationError`), missing entities
(:class:`NotFoundError`), uniqueness clashes (:class:`ConflictError`),
rejected credentials or tokens (:class:`InvalidCredentialsError`,
:class:`UnauthorizedError`, :class:`InvalidOrExpiredTokenError`) and collaborator outages
(:class:`StorageError`, :class:`SyncError`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str, *columns: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL and MySQL report the constraint name; SQLite only reports the
    offending ``table.column`` pairs, which can be passed as ``columns``.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Database constraint name (e.g. ``'uq_publications_doi'``).
    *columns : str
        Optional ``table.column`` markers matched as a fallback.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    return any(col.lower() in message for col in columns)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    These are *not* HTTP errors; the API layer translates them.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """
    Raised for malformed input the caller can fix (empty title, bad date).

    :param message: Human-readable summary.
    :param field_errors: Optional mapping of field name to messages.
    """

    def __init__(self, message: str, field_errors: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field_errors = field_errors or {}


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Author").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Publication").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class UnauthorizedError(ServiceError):
    """
    Raised when a bearer token is rejected.

    ``reason`` is for logs only; clients always get the same message.
    """

    def __init__(self, reason: str = "unauthorized") -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidCredentialsError(UnauthorizedError):
    """Raised when a login email/password pair does not match an active account."""

    def __init__(self) -> None:
        super().__init__("invalid_credentials")


class InvalidOrExpiredTokenError(ServiceError):
    """Raised when a single-use token cannot be redeemed."""

    def __init__(self, reason: str = "invalid_or_expired") -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(slots=True)
class StorageError(ServiceError):
    """
    Raised when a storage collaborator (database, revocation store) fails.

    :param component: Failing collaborator (``"database"``, ``"revocation_store"``).
    :param detail: Internal description, never shown to clients.
    """

    component: str
    detail: str = field(default="")

    def __str__(self) -> str:
        return f"{self.component} unavailable"


@dataclass(slots=True)
class SyncError(ServiceError):
    """
    Raised when the search engine cannot serve a request.

    Index synchronization never raises this to write callers; it is only
    surfaced by read paths that query the search engine directly.
    """

    operation: str
    detail: str = field(default="")

    def __str__(self) -> str:
        return f"search {self.operation} failed"
