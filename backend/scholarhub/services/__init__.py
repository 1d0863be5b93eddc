"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`scholarhub.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``scholarhub.services._shared.base``)
    * :class:`BaseService`

- Shared DTOs (from ``scholarhub.services._shared.dto``)
    * :class:`PageMeta`
    * :class:`Identity`

- Auth services (from ``scholarhub.services.auth``)
    * :class:`AuthService`, :class:`PasswordResetService`
    * DTOs: :class:`LoginIn`, :class:`SessionTokenOut`,
      :class:`PasswordResetRequestIn`, :class:`PasswordResetConfirmIn`,
      :class:`PasswordResetOut`

- Identity service (from ``scholarhub.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`UserRegisterIn`, :class:`UserPublicOut`

- Publication service (from ``scholarhub.services.publications``)
    * :class:`PublicationService`
    * DTOs: :class:`PublicationWriteIn`, :class:`PublicationListIn`,
      :class:`PublicationOut`, :class:`PublicationListOut`

- Search (from ``scholarhub.services.search``)
    * :class:`SearchSynchronizer`
    * DTOs: :class:`SearchDocument`, :class:`SearchIn`, :class:`SearchOut`,
      :class:`ReindexReport`
"""

from __future__ import annotations

# Base primitives
from ._shared.base import BaseService

# Shared DTOs (compose these in endpoint-specific DTOs)
from ._shared.dto import Identity, PageMeta
from .auth import (
    AuthService,
    LoginIn,
    PasswordResetConfirmIn,
    PasswordResetOut,
    PasswordResetRequestIn,
    PasswordResetService,
    SessionTokenOut,
)
from .identity import IdentityService, UserPublicOut, UserRegisterIn
from .publications import (
    PublicationListIn,
    PublicationListOut,
    PublicationOut,
    PublicationService,
    PublicationWriteIn,
)
from .search import ReindexReport, SearchDocument, SearchIn, SearchOut, SearchSynchronizer

__all__ = [
    # Base
    "BaseService",
    # Shared DTOs
    "PageMeta",
    "Identity",
    # Auth
    "AuthService",
    "PasswordResetService",
    "LoginIn",
    "SessionTokenOut",
    "PasswordResetRequestIn",
    "PasswordResetConfirmIn",
    "PasswordResetOut",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserPublicOut",
    # Publications
    "PublicationService",
    "PublicationWriteIn",
    "PublicationListIn",
    "PublicationOut",
    "PublicationListOut",
    # Search
    "SearchSynchronizer",
    "SearchDocument",
    "SearchIn",
    "SearchOut",
    "ReindexReport",
]
