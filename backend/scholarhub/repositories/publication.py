"""Publication repository and its association-row helpers.

Author and keyword links are stored as plain association rows keyed by
``(publication_id, author_id)`` / ``(publication_id, keyword_id)``. They are
written and removed with bulk statements and read back with explicit joins,
so the session never holds back-references between publications and the
catalog rows they point to.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date
from typing import Any

from sqlalchemy import Select, delete, func, insert, select
from sqlalchemy.orm import InstrumentedAttribute

from scholarhub.models.publication import (
    Author,
    Keyword,
    Publication,
    PublicationAuthor,
    PublicationKeyword,
)
from scholarhub.repositories.base import BaseRepository, Page, Pagination


class PublicationRepository(BaseRepository[Publication]):
    """Persistence-only repository for :class:`Publication` and its links."""

    model = Publication

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": Publication.id,
            "title": Publication.title,
            "publication_date": Publication.publication_date,
            "citation_count": Publication.citation_count,
            "created_at": Publication.created_at,
        }

    def _updatable_fields(self) -> set[str]:
        return {
            "title",
            "abstract",
            "doi",
            "publication_date",
            "journal",
            "volume",
            "issue",
            "pages",
            "publisher",
            "citation_count",
            "url",
            "pdf_path",
        }

    # ------------------------------ Lookups ----------------------------------

    def doi_taken(self, doi: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another publication already uses ``doi``."""
        stmt = select(Publication.id).where(Publication.doi == doi)
        if exclude_id is not None:
            stmt = stmt.where(Publication.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def search(
        self,
        pagination: Pagination,
        *,
        journal: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> Page[Publication]:
        """List publications filtered by journal and an inclusive date range.

        :param pagination: Page, limit and sort tokens.
        :param journal: Exact journal name.
        :param from_date: Earliest publication date (inclusive).
        :param to_date: Latest publication date (inclusive).
        :returns: Sorted page of publications.
        """
        stmt: Select[Any] = select(Publication)
        if journal:
            stmt = stmt.where(Publication.journal == journal)
        if from_date is not None:
            stmt = stmt.where(Publication.publication_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(Publication.publication_date <= to_date)
        return self._paginate_stmt(stmt, pagination)

    def get_many(self, publication_ids: Sequence[int]) -> list[Publication]:
        """Return the publications among ``publication_ids``, ordered by id."""
        if not publication_ids:
            return []
        stmt = (
            select(Publication)
            .where(Publication.id.in_(publication_ids))
            .order_by(Publication.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def iter_ids(self, batch_size: int = 500) -> Iterator[int]:
        """Yield every publication id in ascending order, in batches."""
        last = 0
        while True:
            stmt = (
                select(Publication.id)
                .where(Publication.id > last)
                .order_by(Publication.id.asc())
                .limit(batch_size)
            )
            ids = list(self.session.execute(stmt).scalars())
            if not ids:
                return
            yield from ids
            last = ids[-1]

    # ------------------------------ Associations -----------------------------

    def ordered_authors(self, publication_id: int) -> list[Author]:
        """Return the publication's authors sorted by ``position``."""
        return self.ordered_authors_for([publication_id]).get(publication_id, [])

    def ordered_authors_for(self, publication_ids: Sequence[int]) -> dict[int, list[Author]]:
        """Return ordered authors for several publications in one query."""
        if not publication_ids:
            return {}
        stmt = (
            select(PublicationAuthor.publication_id, Author)
            .join(Author, Author.id == PublicationAuthor.author_id)
            .where(PublicationAuthor.publication_id.in_(publication_ids))
            .order_by(PublicationAuthor.publication_id, PublicationAuthor.position)
        )
        grouped: dict[int, list[Author]] = defaultdict(list)
        for pub_id, author in self.session.execute(stmt):
            grouped[pub_id].append(author)
        return dict(grouped)

    def keywords(self, publication_id: int) -> list[Keyword]:
        """Return the publication's keywords sorted by name."""
        return self.keywords_for([publication_id]).get(publication_id, [])

    def keywords_for(self, publication_ids: Sequence[int]) -> dict[int, list[Keyword]]:
        if not publication_ids:
            return {}
        stmt = (
            select(PublicationKeyword.publication_id, Keyword)
            .join(Keyword, Keyword.id == PublicationKeyword.keyword_id)
            .where(PublicationKeyword.publication_id.in_(publication_ids))
            .order_by(PublicationKeyword.publication_id, Keyword.name)
        )
        grouped: dict[int, list[Keyword]] = defaultdict(list)
        for pub_id, keyword in self.session.execute(stmt):
            grouped[pub_id].append(keyword)
        return dict(grouped)

    def replace_authors(self, publication_id: int, author_ids: Iterable[int]) -> None:
        """Drop every author link of the publication and insert the new list.

        ``position`` equals the index in ``author_ids`` (0-based).
        """
        self.clear_authors(publication_id)
        rows = [
            {"publication_id": publication_id, "author_id": author_id, "position": index}
            for index, author_id in enumerate(author_ids)
        ]
        if rows:
            self.session.execute(insert(PublicationAuthor), rows)

    def replace_keywords(self, publication_id: int, keyword_ids: Iterable[int]) -> None:
        """Drop every keyword link of the publication and insert the new set."""
        self.clear_keywords(publication_id)
        rows = [
            {"publication_id": publication_id, "keyword_id": keyword_id}
            for keyword_id in keyword_ids
        ]
        if rows:
            self.session.execute(insert(PublicationKeyword), rows)

    def clear_authors(self, publication_id: int) -> None:
        self.session.execute(
            delete(PublicationAuthor).where(PublicationAuthor.publication_id == publication_id)
        )

    def clear_keywords(self, publication_id: int) -> None:
        self.session.execute(
            delete(PublicationKeyword).where(PublicationKeyword.publication_id == publication_id)
        )

    def count_associations(self, publication_id: int | None = None) -> tuple[int, int]:
        """Return ``(author_links, keyword_links)``, optionally for one publication."""
        authors = select(func.count()).select_from(PublicationAuthor)
        keywords = select(func.count()).select_from(PublicationKeyword)
        if publication_id is not None:
            authors = authors.where(PublicationAuthor.publication_id == publication_id)
            keywords = keywords.where(PublicationKeyword.publication_id == publication_id)
        return (
            int(self.session.execute(authors).scalar_one()),
            int(self.session.execute(keywords).scalar_one()),
        )
