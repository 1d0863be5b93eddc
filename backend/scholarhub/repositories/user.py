"""User repository: account lookups and credential persistence."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select

from scholarhub.models.user import User
from scholarhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Token issuing and revocation live in the auth services; this class only
    reads and writes rows.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email, normalised the same way the model stores it.

        :param email: Raw email address.
        :returns: Matching user or ``None``.
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        return self.session.execute(stmt).first() is not None

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt).first() is not None

    def update_password(self, user_id: int, new_password: str) -> None:
        """Hash and store ``new_password`` for ``user_id`` and flush.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password
        self.flush()

    def touch_last_login(self, user: User, when: datetime) -> None:
        user.last_login = when
        self.flush()

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when ``password`` matches, else ``None``.

        Inactive accounts never authenticate.
        """
        user = self.get_by_email(email)
        if user is None or not user.is_active or not user.verify_password(password):
            return None
        return user
