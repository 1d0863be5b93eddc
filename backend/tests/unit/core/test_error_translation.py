# tests/unit/core/test_error_translation.py
from __future__ import annotations

import pytest
from scholarhub.core import errors as api_errors
from scholarhub.services._shared.base import translate_service_error
from scholarhub.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    StorageError,
    SyncError,
    UnauthorizedError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("exc", "expected", "status"),
    [
        (ValidationError("bad", {"title": ["blank"]}), api_errors.UnprocessableEntity, 422),
        (NotFoundError("Author", 3), api_errors.NotFound, 404),
        (ConflictError("Publication", "doi already in use"), api_errors.Conflict, 409),
        (UnauthorizedError("revoked"), api_errors.Unauthorized, 401),
        (InvalidCredentialsError(), api_errors.Unauthorized, 401),
        (InvalidOrExpiredTokenError("consumed"), api_errors.InvalidOrExpiredToken, 400),
        (StorageError("revocation_store", "timeout"), api_errors.ServiceUnavailable, 503),
        (SyncError("search", "boom"), api_errors.ServiceUnavailable, 503),
    ],
)
def test_service_errors_map_to_http_errors(exc, expected, status):
    translated = translate_service_error(exc)

    assert isinstance(translated, expected)
    assert translated.status_code == status


def test_unauthorized_message_never_reveals_reason():
    for reason in ("revoked", "expired", "purpose_mismatch", "algorithm"):
        assert translate_service_error(UnauthorizedError(reason)).message == (
            api_errors.UNAUTHORIZED_MESSAGE
        )


def test_failed_login_has_its_own_message():
    translated = translate_service_error(InvalidCredentialsError())

    assert translated.message == "Invalid credentials"
    assert translated.code == "unauthorized"


def test_storage_error_hides_internal_detail():
    translated = translate_service_error(StorageError("database", "password=hunter2"))
    assert "hunter2" not in translated.message


def test_non_service_errors_pass_through():
    err = KeyError("x")
    assert translate_service_error(err) is err


def test_problem_details_shape(app):
    with app.test_request_context("/api/v1/publications/9"):
        problem = api_errors.NotFound("Publication not found: 9").to_problem()

    assert problem["status"] == 404
    assert problem["title"] == "Not Found"
    assert problem["instance"] == "/api/v1/publications/9"
    assert problem["code"] == "not_found"
    assert problem["request_id"]


def test_unknown_route_returns_problem_json(client):
    res = client.get("/api/v1/nope", headers={"X-Request-ID": "req-123"})

    assert res.status_code == 404
    assert res.mimetype == "application/problem+json"
    assert res.get_json()["request_id"] == "req-123"
