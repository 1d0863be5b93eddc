"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from scholarhub.repositories.author import AuthorRepository
from scholarhub.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from scholarhub.repositories.keyword import KeywordRepository
from scholarhub.repositories.publication import PublicationRepository
from scholarhub.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "apply_sorting",
    "paginate_select",
    # Domain
    "AuthorRepository",
    "KeywordRepository",
    "PublicationRepository",
    "UserRepository",
]
