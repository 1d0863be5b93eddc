"""
PublicationService
==================

Write coordinator for publications and their author/keyword associations.

A create, update or delete touches the publication row and every one of its
association rows inside a single unit of work. Nothing is visible outside
the transaction until it commits, and any failure (missing author, duplicate
DOI, storage error) rolls back all of it. Only after a successful commit is
the search document scheduled for synchronization, so the index never sees
state that was rolled back.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from scholarhub.models.publication import Publication
from scholarhub.repositories.publication import PublicationRepository
from scholarhub.services._shared.base import BaseService
from scholarhub.services._shared.dto import PageMeta
from scholarhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
    violates,
)
from scholarhub.services.publications.dto import (
    PublicationListIn,
    PublicationListOut,
    PublicationOut,
    PublicationWriteIn,
)
from scholarhub.services.search.dto import SearchDocument
from scholarhub.services.search.service import SearchSynchronizer

log = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_SORT = ["-publication_date"]


class PublicationService(BaseService):
    """
    Application service for the ``Publication`` aggregate.

    :param synchronizer: Receives post-commit index/remove requests.
    """

    def __init__(self, *, synchronizer: SearchSynchronizer) -> None:
        super().__init__()
        self.sync = synchronizer

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create(self, dto: PublicationWriteIn) -> PublicationOut:
        return self.save(dto)

    def update(self, publication_id: int, dto: PublicationWriteIn) -> PublicationOut:
        return self.save(dto, existing_id=publication_id)

    def save(self, dto: PublicationWriteIn, existing_id: int | None = None) -> PublicationOut:
        """
        Create (``existing_id is None``) or fully replace a publication.

        Authors and keywords are replaced, never merged: after an update no
        association row from before survives. Author order is the order of
        ``dto.author_ids``.

        :raises ValidationError: Blank title, bad date, blank keyword,
            duplicate author id.
        :raises NotFoundError: Target publication or a referenced author is
            missing.
        :raises ConflictError: DOI already used by another publication.
        :raises StorageError: The transaction could not be run or committed.
        """
        fields = self._validate_fields(dto, creating=existing_id is None)
        keyword_names = self._normalize_keywords(dto.keywords)
        author_ids = self._validate_author_ids(dto.author_ids)

        try:
            with self.rw_uow() as uow:
                repo: PublicationRepository = uow.publications

                doi = fields.get("doi")
                if doi and repo.doi_taken(doi, exclude_id=existing_id):
                    raise ConflictError("Publication", "doi already in use")

                if existing_id is None:
                    publication = repo.add(Publication(**fields))
                else:
                    publication = repo.get(existing_id)
                    if publication is None:
                        raise NotFoundError("Publication", existing_id)
                    repo.update(publication, **fields)

                keyword_ids = [uow.keywords.ensure(name).id for name in keyword_names]
                repo.replace_keywords(publication.id, keyword_ids)

                found = uow.authors.get_many(author_ids)
                for author_id in author_ids:
                    if author_id not in found:
                        raise NotFoundError("Author", author_id)
                repo.replace_authors(publication.id, author_ids)

                out, document = self._snapshot(repo, publication)
        except IntegrityError as exc:
            raise self._conflict_from(exc) from exc
        except SQLAlchemyError as exc:
            log.error("Publication write failed: %s", exc)
            raise StorageError("database", str(exc)) from exc

        log.info(
            "Publication %s %s",
            out.id,
            "created" if existing_id is None else "updated",
            extra={"publication_id": out.id},
        )
        self.sync.index_publication(document)
        return out

    def delete(self, publication_id: int) -> None:
        """
        Delete a publication with its association rows, then schedule the
        removal of its search document.

        :raises NotFoundError: If the publication does not exist.
        :raises StorageError: The transaction could not be run or committed.
        """
        try:
            with self.rw_uow() as uow:
                repo: PublicationRepository = uow.publications
                publication = repo.get(publication_id)
                if publication is None:
                    raise NotFoundError("Publication", publication_id)
                repo.clear_keywords(publication_id)
                repo.clear_authors(publication_id)
                repo.delete(publication)
        except SQLAlchemyError as exc:
            log.error("Publication delete failed: %s", exc)
            raise StorageError("database", str(exc)) from exc

        log.info("Publication %s deleted", publication_id, extra={"publication_id": publication_id})
        self.sync.remove_publication(publication_id)

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get(self, publication_id: int) -> PublicationOut:
        """
        :raises NotFoundError: If the publication does not exist.
        """
        with self.ro_uow() as uow:
            repo: PublicationRepository = uow.publications
            publication = repo.get(publication_id)
            if publication is None:
                raise NotFoundError("Publication", publication_id)
            return PublicationOut.from_rows(
                publication,
                repo.ordered_authors(publication_id),
                repo.keywords(publication_id),
            )

    def list_publications(self, dto: PublicationListIn) -> PublicationListOut:
        """List publications, newest first, optionally by journal and date range."""
        if dto.from_date and dto.to_date and dto.from_date > dto.to_date:
            raise ValidationError(
                "Invalid date range", {"from_date": ["Must not be after to_date."]}
            )
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit, sort=DEFAULT_SORT)

        with self.ro_uow() as uow:
            repo: PublicationRepository = uow.publications
            page = repo.search(
                pagination, journal=dto.journal, from_date=dto.from_date, to_date=dto.to_date
            )
            ids = [p.id for p in page.items]
            authors = repo.ordered_authors_for(ids)
            keywords = repo.keywords_for(ids)
            items = [
                PublicationOut.from_rows(p, authors.get(p.id, []), keywords.get(p.id, []))
                for p in page.items
            ]

        return PublicationListOut(
            items=items,
            meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total),
        )

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    @staticmethod
    def _snapshot(
        repo: PublicationRepository, publication: Publication
    ) -> tuple[PublicationOut, SearchDocument]:
        authors = repo.ordered_authors(publication.id)
        keywords = repo.keywords(publication.id)
        return (
            PublicationOut.from_rows(publication, authors, keywords),
            SearchDocument.from_publication(publication, authors, keywords),
        )

    @staticmethod
    def _conflict_from(exc: IntegrityError) -> Exception:
        if violates(exc, "uq_publications_doi", "publications.doi"):
            return ConflictError("Publication", "doi already in use")
        return ConflictError("Publication", "constraint violation")

    @staticmethod
    def _parse_date(value: str | date | None) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return datetime.strptime(value.strip(), DATE_FORMAT).date()
            except ValueError:
                pass
        raise ValidationError(
            "Invalid publication date",
            {"publication_date": ["Expected a date formatted as YYYY-MM-DD."]},
        )

    def _validate_fields(self, dto: PublicationWriteIn, *, creating: bool) -> dict[str, Any]:
        title = (dto.title or "").strip()
        if not title:
            raise ValidationError("Title is required", {"title": ["Must not be blank."]})

        if dto.citation_count is None or int(dto.citation_count) < 0:
            raise ValidationError(
                "Invalid citation count", {"citation_count": ["Must be zero or greater."]}
            )

        fields: dict[str, Any] = {
            "title": title,
            "abstract": dto.abstract,
            "doi": (dto.doi or "").strip() or None,
            "journal": dto.journal,
            "volume": dto.volume,
            "issue": dto.issue,
            "pages": dto.pages,
            "publisher": dto.publisher,
            "citation_count": int(dto.citation_count),
            "url": dto.url,
            "pdf_path": dto.pdf_path,
        }
        if dto.publication_date is not None or creating:
            fields["publication_date"] = self._parse_date(dto.publication_date)
        return fields

    @staticmethod
    def _normalize_keywords(names: list[str] | None) -> list[str]:
        seen: dict[str, None] = {}
        for raw in names or []:
            name = (raw or "").strip()
            if not name:
                raise ValidationError("Keyword names must not be blank", {"keywords": ["blank"]})
            seen.setdefault(name, None)
        return list(seen)

    @staticmethod
    def _validate_author_ids(author_ids: list[int] | None) -> list[int]:
        ids = [int(a) for a in author_ids or []]
        if len(set(ids)) != len(ids):
            raise ValidationError(
                "An author may appear only once", {"author_ids": ["Duplicate author id."]}
            )
        return ids
