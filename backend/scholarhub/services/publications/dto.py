"""
DTOs for PublicationService.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from scholarhub.services._shared.dto import PageMeta

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PublicationWriteIn:
    """
    Input for creating or replacing a publication.

    :param title: Required, non-blank.
    :param publication_date: ``YYYY-MM-DD`` string or :class:`date`. Required
        on create; ``None`` on update keeps the stored date.
    :param keywords: Keyword names; duplicates are collapsed, first
        occurrence wins.
    :param author_ids: Existing author ids in author order.
    """

    title: str
    publication_date: str | date | None = None
    abstract: str | None = None
    doi: str | None = None
    journal: str | None = None
    volume: str | None = None
    issue: str | None = None
    pages: str | None = None
    publisher: str | None = None
    citation_count: int = 0
    url: str | None = None
    pdf_path: str | None = None
    keywords: list[str] = field(default_factory=list)
    author_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PublicationListIn:
    """
    Filters for the relational listing.

    :param journal: Exact journal name.
    :param from_date: Inclusive lower bound on ``publication_date``.
    :param to_date: Inclusive upper bound on ``publication_date``.
    """

    journal: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    page: int = 1
    limit: int = 10


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthorRefOut:
    id: int
    name: str
    position: int
    institution: str | None = None


@dataclass(frozen=True, slots=True)
class PublicationOut:
    """Publication with its ordered authors and keyword names."""

    id: int
    title: str
    abstract: str | None
    doi: str | None
    publication_date: date
    journal: str | None
    volume: str | None
    issue: str | None
    pages: str | None
    publisher: str | None
    citation_count: int
    url: str | None
    pdf_path: str | None
    authors: list[AuthorRefOut]
    keywords: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_rows(cls, publication, authors, keywords) -> PublicationOut:
        return cls(
            id=publication.id,
            title=publication.title,
            abstract=publication.abstract,
            doi=publication.doi,
            publication_date=publication.publication_date,
            journal=publication.journal,
            volume=publication.volume,
            issue=publication.issue,
            pages=publication.pages,
            publisher=publication.publisher,
            citation_count=publication.citation_count,
            url=publication.url,
            pdf_path=publication.pdf_path,
            authors=[
                AuthorRefOut(id=a.id, name=a.name, position=i, institution=a.institution)
                for i, a in enumerate(authors)
            ],
            keywords=[k.name for k in keywords],
            created_at=publication.created_at,
            updated_at=publication.updated_at,
        )


@dataclass(frozen=True, slots=True)
class PublicationListOut:
    items: list[PublicationOut]
    meta: PageMeta
