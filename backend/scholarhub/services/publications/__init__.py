"""Publication write coordination and listing."""

from __future__ import annotations

from .dto import (
    AuthorRefOut,
    PublicationListIn,
    PublicationListOut,
    PublicationOut,
    PublicationWriteIn,
)
from .service import PublicationService

__all__ = [
    "PublicationService",
    "AuthorRefOut",
    "PublicationListIn",
    "PublicationListOut",
    "PublicationOut",
    "PublicationWriteIn",
]
