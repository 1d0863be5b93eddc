"""Session tokens and password-reset tokens."""

from __future__ import annotations

from .dto import (
    PASSWORD_RESET_PURPOSE,
    AuthTokenConfig,
    LoginIn,
    PasswordResetConfirmIn,
    PasswordResetOut,
    PasswordResetRequestIn,
    SessionTokenOut,
)
from .password_reset import PasswordResetService
from .service import AuthService

__all__ = [
    "AuthService",
    "PasswordResetService",
    "PASSWORD_RESET_PURPOSE",
    "AuthTokenConfig",
    "LoginIn",
    "PasswordResetConfirmIn",
    "PasswordResetOut",
    "PasswordResetRequestIn",
    "SessionTokenOut",
]
