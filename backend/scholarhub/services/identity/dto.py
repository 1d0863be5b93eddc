"""
DTOs for IdentityService.

Data Transfer Objects isolate the service layer from ORM models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param email: Login email (normalized to lowercase by the model).
    :param password: Raw password, hashed by the model setter.
    :param username: Public username.
    :param institution: Optional affiliation.
    """

    email: str
    password: str
    username: str
    institution: str | None = None
    biography: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public-safe user data; never carries the password hash."""

    id: int
    email: str
    username: str
    institution: str | None
    biography: str | None
    profile_image_url: str | None
    date_joined: datetime | None
    last_login: datetime | None

    @classmethod
    def from_model(cls, user) -> UserPublicOut:
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            institution=user.institution,
            biography=user.biography,
            profile_image_url=user.profile_image_url,
            date_joined=user.created_at,
            last_login=user.last_login,
        )
