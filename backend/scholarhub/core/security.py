"""Password hashing primitives shared by the identity model and services."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

MIN_PASSWORD_LENGTH = 8


def hash_password(raw: str) -> str:
    """
    Hash a plain-text password.

    :param raw: Plain text password.
    :type raw: str
    :returns: Salted hash suitable for storage.
    :rtype: str
    :raises ValueError: If ``raw`` is empty or not a string.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(raw)


def verify_password(stored_hash: str | None, raw: str) -> bool:
    """
    Check a password candidate against a stored hash.

    :param stored_hash: Hash produced by :func:`hash_password`.
    :param raw: Plain text candidate.
    :returns: ``True`` when they match.
    """
    if not stored_hash or not isinstance(raw, str):
        return False
    # ``check_password_hash`` is untyped; coerce to bool for mypy.
    return bool(check_password_hash(stored_hash, raw))
