"""
IdentityService
===============

Service responsible for the ``User`` aggregate: registration and lookup.
Credential verification and token issuance live in
:mod:`scholarhub.services.auth`.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from scholarhub.core.security import MIN_PASSWORD_LENGTH
from scholarhub.repositories.user import UserRepository
from scholarhub.services._shared.base import BaseService
from scholarhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    violates,
)
from scholarhub.services.identity.dto import UserPublicOut, UserRegisterIn


class IdentityService(BaseService):
    """Application service for the ``User`` aggregate."""

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :returns: Public-safe user DTO.
        :raises ValidationError: If the password is too short or the email
            is malformed.
        :raises ConflictError: If the email or username is taken.
        """
        if len(dto.password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Password too short",
                {"password": [f"Must be at least {MIN_PASSWORD_LENGTH} characters."]},
            )

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("User", "email already in use")
            if repo.exists_by_username(dto.username):
                raise ConflictError("User", "username already in use")

            try:
                user = repo.model(
                    email=dto.email,
                    password=dto.password,
                    username=dto.username,
                    institution=dto.institution,
                    biography=dto.biography,
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc

            try:
                repo.add(user)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email", "users.email"):
                    raise ConflictError("User", "email already in use") from exc
                if violates(exc, "uq_users_username", "users.username"):
                    raise ConflictError("User", "username already in use") from exc
                raise

            return UserPublicOut.from_model(user)

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut.from_model(user)
