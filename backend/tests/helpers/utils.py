"""Helpers shared by the API and service test modules."""

from __future__ import annotations

from contextlib import contextmanager

from flask.testing import FlaskClient

from tests.factories.user import DEFAULT_PASSWORD

AUTH_BASE = "/api/v1/auth"


def login(client: FlaskClient, email: str, password: str = DEFAULT_PASSWORD):
    """POST credentials to the login endpoint and return the raw response."""
    return client.post(f"{AUTH_BASE}/login", json={"email": email, "password": password})


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def session_headers(client: FlaskClient, email: str) -> dict[str, str]:
    """Sign ``email`` in with the factory password and return its auth header."""
    res = login(client, email)
    assert res.status_code == 200, res.get_json()
    return bearer(res.get_json()["data"]["access_token"])


def problem(res) -> dict:
    """Return the body of an RFC 7807 error response."""
    assert res.mimetype == "application/problem+json", res.mimetype
    return res.get_json()


@contextmanager
def not_raises(exception: type[BaseException]):
    """Fail the test, instead of erroring, when ``exception`` escapes the block."""
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"unexpected {type(exc).__name__}: {exc}") from exc
