# scholarhub/services/search/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from scholarhub.services._shared.dto import PageMeta


@dataclass(frozen=True, slots=True)
class SearchDocument:
    """
    Denormalized, read-only projection of a committed publication.

    Author and keyword names are flattened to plain strings so the document
    can be handed to a background job without any ORM state.

    :param id: Publication id, also the document id in the index.
    :param authors: Author names in author order.
    :param keywords: Keyword names.
    """

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
    authors: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()

    @classmethod
    def from_publication(cls, publication, authors, keywords) -> SearchDocument:
        """Build the document from ORM rows (publication, ordered authors, keywords)."""
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
            authors=tuple(a.name for a in authors),
            keywords=tuple(k.name for k in keywords),
        )

    def to_source(self) -> dict[str, Any]:
        """Return the JSON body stored in the search engine."""
        return {
            "id": self.id,
            "title": self.title,
            "abstract": self.abstract,
            "doi": self.doi,
            "publication_date": self.publication_date.isoformat(),
            "journal": self.journal,
            "volume": self.volume,
            "issue": self.issue,
            "pages": self.pages,
            "publisher": self.publisher,
            "citation_count": self.citation_count,
            "url": self.url,
            "authors": list(self.authors),
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True, slots=True)
class SearchIn:
    """
    Full-text query input.

    :param q: Free-text query; must not be blank.
    :param page: 1-based page.
    :param limit: Page size.
    """

    q: str
    page: int = 1
    limit: int = 10


@dataclass(frozen=True, slots=True)
class SearchHitOut:
    id: int
    score: float
    document: dict[str, Any]


@dataclass(frozen=True, slots=True)
class SearchOut:
    items: list[SearchHitOut]
    meta: PageMeta


@dataclass(slots=True)
class ReindexReport:
    """Counts produced by a full re-synchronization."""

    indexed: int = 0
    failed: int = 0
    failed_ids: list[int] = field(default_factory=list)
    removed: int = 0
