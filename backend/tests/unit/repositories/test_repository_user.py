from __future__ import annotations

from datetime import UTC, datetime

from scholarhub.repositories.user import UserRepository

from tests.factories.user import UserFactory


def test_get_by_email_is_case_insensitive(session):
    user = UserFactory(email="someone@example.com")
    repo = UserRepository(session=session)

    assert repo.get_by_email("SomeOne@Example.com") is user


def test_authenticate(session):
    user = UserFactory(password="correct-horse")
    repo = UserRepository(session=session)

    assert repo.authenticate(user.email, "correct-horse") is user
    assert repo.authenticate(user.email, "wrong") is None
    assert repo.authenticate("nobody@example.com", "correct-horse") is None


def test_authenticate_rejects_inactive_user(session):
    user = UserFactory(password="correct-horse", is_active=False)

    assert UserRepository(session=session).authenticate(user.email, "correct-horse") is None


def test_update_password_and_last_login(session):
    user = UserFactory(password="old-password")
    repo = UserRepository(session=session)

    repo.update_password(user.id, "new-password")
    when = datetime(2024, 5, 1, tzinfo=UTC)
    repo.touch_last_login(user, when)

    assert user.verify_password("new-password")
    assert not user.verify_password("old-password")
    assert user.last_login == when
