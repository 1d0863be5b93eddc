# scholarhub/services/search/service.py
"""
Search synchronization and querying.

The relational store is the source of truth. Documents in the search index
are a best-effort mirror: after a publication write commits, a job is handed
to the task runner to upsert or delete the matching document. A failing job
is logged and dropped, never retried and never reported to the writer. A
later update of the same publication, or ``flask search reindex``, brings the
document back in line.
"""

from __future__ import annotations

import logging

from scholarhub.core.logger import current_request_id
from scholarhub.services._shared.base import BaseService
from scholarhub.services._shared.dto import PageMeta
from scholarhub.services._shared.errors import SyncError, ValidationError
from scholarhub.services._shared.ports.search_index import SearchIndex, SearchIndexError
from scholarhub.services._shared.ports.task_runner import TaskRunner
from scholarhub.services.search.dto import (
    ReindexReport,
    SearchDocument,
    SearchHitOut,
    SearchIn,
    SearchOut,
)

log = logging.getLogger(__name__)


class SearchSynchronizer(BaseService):
    """
    Mirror publications into the search index and serve full-text queries.

    :param index: Search engine adapter.
    :param runner: Where post-commit jobs run; jobs only receive immutable
        values captured after the commit.
    """

    def __init__(self, *, index: SearchIndex, runner: TaskRunner) -> None:
        super().__init__()
        self.index = index
        self.runner = runner

    # ------------------------------------------------------------------ #
    # Fire-and-forget synchronization
    # ------------------------------------------------------------------ #

    def index_publication(self, document: SearchDocument) -> None:
        """Schedule an upsert of ``document``; returns immediately."""
        self._schedule("index", document.id, self._upsert_job, document)

    def remove_publication(self, publication_id: int) -> None:
        """Schedule the deletion of the document for ``publication_id``."""
        self._schedule("delete", publication_id, self._delete_job, publication_id)

    def _schedule(self, operation: str, publication_id: int, job, payload) -> None:
        request_id = current_request_id()
        try:
            accepted = self.runner.submit(job, payload, request_id)
        except RuntimeError as exc:
            # Executor already shut down.
            accepted = False
            log.error(
                "Search %s not scheduled: %s",
                operation,
                exc,
                extra={"publication_id": publication_id, "operation": operation},
            )
        if not accepted:
            log.error(
                "Search %s dropped for publication %s",
                operation,
                publication_id,
                extra={"publication_id": publication_id, "operation": operation},
            )

    def _upsert_job(self, document: SearchDocument, request_id: str | None) -> None:
        try:
            self.index.upsert(document.id, document.to_source())
        except Exception as exc:
            self._record_failure("index", document.id, request_id, exc)
            return
        log.debug(
            "Indexed publication %s",
            document.id,
            extra={"publication_id": document.id, "operation": "index", "request_id": request_id},
        )

    def _delete_job(self, publication_id: int, request_id: str | None) -> None:
        try:
            self.index.delete(publication_id)
        except Exception as exc:
            self._record_failure("delete", publication_id, request_id, exc)
            return
        log.debug(
            "Removed publication %s from index",
            publication_id,
            extra={
                "publication_id": publication_id,
                "operation": "delete",
                "request_id": request_id,
            },
        )

    @staticmethod
    def _record_failure(
        operation: str, publication_id: int, request_id: str | None, exc: Exception
    ) -> None:
        log.error(
            "Search %s failed for publication %s: %s",
            operation,
            publication_id,
            exc,
            extra={
                "publication_id": publication_id,
                "operation": operation,
                "request_id": request_id,
                "reason": type(exc).__name__,
            },
        )

    # ------------------------------------------------------------------ #
    # Reconciliation
    # ------------------------------------------------------------------ #

    def reindex(self, *, batch_size: int = 200) -> ReindexReport:
        """
        Synchronously re-send every publication to the index.

        This is the only retry path for failed synchronization. It runs in
        the caller's thread (CLI) and reads each batch from the relational
        store through a read-only unit of work.

        :raises SyncError: If the index cannot be created or reached.
        """
        try:
            self.index.ensure_index()
        except SearchIndexError as exc:
            raise SyncError("ensure_index", str(exc)) from exc

        report = ReindexReport()
        with self.ro_uow() as uow:
            ids = list(uow.publications.iter_ids())

        for start in range(0, len(ids), batch_size):
            chunk = ids[start : start + batch_size]
            with self.ro_uow() as uow:
                repo = uow.publications
                authors = repo.ordered_authors_for(chunk)
                keywords = repo.keywords_for(chunk)
                documents = [
                    SearchDocument.from_publication(
                        pub, authors.get(pub.id, []), keywords.get(pub.id, [])
                    )
                    for pub in repo.get_many(chunk)
                ]
            try:
                rejected = set(self.index.upsert_many({d.id: d.to_source() for d in documents}))
            except SearchIndexError as exc:
                log.error("Reindex batch of %s failed: %s", len(documents), exc)
                rejected = {d.id for d in documents}
            for document in documents:
                if document.id in rejected:
                    report.failed += 1
                    report.failed_ids.append(document.id)
                else:
                    report.indexed += 1

        report.removed = self._prune()
        log.info(
            "Reindex finished: %s indexed, %s failed, %s removed",
            report.indexed,
            report.failed,
            report.removed,
        )
        return report

    def _prune(self) -> int:
        """Delete indexed documents whose publication no longer exists."""
        try:
            # Index ids are listed before the relational read: a document is
            # only ever written after its row commits.
            indexed = self.index.ids()
        except SearchIndexError as exc:
            log.error("Listing indexed documents failed: %s", exc, extra={"operation": "delete"})
            return 0
        with self.ro_uow() as uow:
            known = set(uow.publications.iter_ids())
        stale = [doc_id for doc_id in indexed if doc_id not in known]
        if not stale:
            return 0
        try:
            failed = set(self.index.delete_many(stale))
        except SearchIndexError as exc:
            log.error("Removing %s stale documents failed: %s", len(stale), exc)
            return 0
        for doc_id in failed:
            log.error(
                "Search delete failed for publication %s",
                doc_id,
                extra={"publication_id": doc_id, "operation": "delete"},
            )
        return len(stale) - len(failed)

    # ------------------------------------------------------------------ #
    # Query
    # ------------------------------------------------------------------ #

    def search(self, dto: SearchIn) -> SearchOut:
        """
        Run a relevance-ranked full-text query.

        :raises ValidationError: If the query is blank.
        :raises SyncError: If the search engine fails.
        """
        q = (dto.q or "").strip()
        if not q:
            raise ValidationError("Search query is required", {"q": ["Must not be blank."]})
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit)
        offset = (pagination.page - 1) * pagination.limit

        try:
            result = self.index.search(q, offset=offset, size=pagination.limit)
        except SearchIndexError as exc:
            log.error("Search query failed: %s", exc, extra={"operation": "search"})
            raise SyncError("search", str(exc)) from exc

        return SearchOut(
            items=[SearchHitOut(id=h.id, score=h.score, document=h.source) for h in result.hits],
            meta=PageMeta.build(page=pagination.page, limit=pagination.limit, total=result.total),
        )
