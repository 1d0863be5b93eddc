"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    PasswordResetConfirmSchema,
    PasswordResetRequestSchema,
    RegisterSchema,
    TokenResponseSchema,
)
from .common import MetaSchema, PaginationQuerySchema
from .publication import (
    PublicationListQuerySchema,
    PublicationListSchema,
    PublicationSchema,
    PublicationWriteSchema,
    SearchQuerySchema,
    SearchResultSchema,
)
from .user import UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "PasswordResetRequestSchema",
    "PasswordResetConfirmSchema",
    "PaginationQuerySchema",
    "MetaSchema",
    "PublicationWriteSchema",
    "PublicationSchema",
    "PublicationListSchema",
    "PublicationListQuerySchema",
    "SearchQuerySchema",
    "SearchResultSchema",
    "UserSchema",
]
