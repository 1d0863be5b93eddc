# scholarhub/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

#: Purpose tag carried by password-reset tokens.
PASSWORD_RESET_PURPOSE = "password_reset"

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class PasswordResetRequestIn:
    email: str


@dataclass(frozen=True, slots=True)
class PasswordResetConfirmIn:
    """
    Input DTO for redeeming a password-reset token.

    :param token: Encoded reset token received out-of-band.
    :param new_password: Raw replacement password.
    """

    token: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SessionTokenOut:
    """
    Output DTO for a freshly issued session token.

    :param access_token: Encoded session JWT.
    :param expires_in: Lifetime in seconds.
    :param token_type: Always ``"Bearer"``.
    """

    access_token: str
    expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class PasswordResetOut:
    """
    Result of a reset request.

    ``token`` is only filled when the environment exposes reset tokens,
    since delivery happens out-of-band.
    """

    token: str | None = None


# ------------------------ Config DTO --------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token lifetimes.

    :param session_expires: Session token lifetime (7 days by default).
    :param reset_expires: Password-reset token lifetime (24 hours by default).
    """

    session_expires: timedelta = timedelta(days=7)
    reset_expires: timedelta = timedelta(hours=24)
