# tests/unit/services/test_search_synchronizer.py
from __future__ import annotations

import logging
from datetime import date

import pytest
from scholarhub.services._shared.errors import SyncError, ValidationError
from scholarhub.services._shared.ports import InMemorySearchIndex, SearchIndexError
from scholarhub.services.search.dto import SearchDocument, SearchIn
from scholarhub.services.search.service import SearchSynchronizer

from tests.factories.publication import PublicationFactory


def _doc(doc_id: int, title: str, published: date = date(2024, 1, 1), **extra) -> SearchDocument:
    fields = {
        "abstract": None,
        "doi": None,
        "journal": None,
        "volume": None,
        "issue": None,
        "pages": None,
        "publisher": None,
        "citation_count": 0,
        "url": None,
    }
    fields.update(extra)
    return SearchDocument(id=doc_id, title=title, publication_date=published, **fields)


class PartiallyRejectingIndex(InMemorySearchIndex):
    """Index that refuses the documents whose id is in ``reject``."""

    def __init__(self, reject: set[int]) -> None:
        super().__init__()
        self.reject = reject

    def upsert_many(self, documents):
        accepted = {k: v for k, v in documents.items() if k not in self.reject}
        super().upsert_many(accepted)
        return sorted(k for k in documents if k in self.reject)


@pytest.fixture()
def sync(search_index, runner) -> SearchSynchronizer:
    return SearchSynchronizer(index=search_index, runner=runner)


# ------------------------------ Jobs -------------------------------------- #
def test_index_then_remove(sync, search_index):
    sync.index_publication(_doc(7, "Graph neural networks", authors=("Ada",)))
    assert search_index.documents[7]["authors"] == ["Ada"]

    sync.remove_publication(7)
    assert 7 not in search_index.documents


def test_remove_missing_document_is_not_an_error(sync, search_index):
    sync.remove_publication(12345)
    assert search_index.documents == {}


def test_job_failure_is_swallowed_and_logged(sync, search_index, caplog):
    search_index.available = False

    sync.index_publication(_doc(1, "Offline"))

    record = next(r for r in caplog.records if "failed for publication" in r.getMessage())
    assert record.publication_id == 1
    assert record.operation == "index"
    assert record.reason == "SearchIndexError"


# ---------------------------- Reindex ------------------------------------- #
def test_reindex_sends_every_publication(sync, search_index):
    pubs = [PublicationFactory() for _ in range(5)]

    report = sync.reindex(batch_size=2)

    assert report.indexed == 5
    assert report.failed == 0
    assert set(search_index.documents) == {p.id for p in pubs}


def test_reindex_counts_rejected_documents(runner):
    pubs = [PublicationFactory() for _ in range(3)]
    index = PartiallyRejectingIndex(reject={pubs[1].id})
    sync = SearchSynchronizer(index=index, runner=runner)

    report = sync.reindex()

    assert (report.indexed, report.failed) == (2, 1)
    assert report.failed_ids == [pubs[1].id]


def test_reindex_raises_when_engine_is_down(sync, search_index):
    PublicationFactory()
    search_index.available = False

    with pytest.raises(SyncError):
        sync.reindex()


def test_reindex_counts_failed_batch(runner):
    class FlakyIndex(InMemorySearchIndex):
        def upsert_many(self, documents):
            raise SearchIndexError("bulk request timed out")

    pubs = [PublicationFactory() for _ in range(2)]
    sync = SearchSynchronizer(index=FlakyIndex(), runner=runner)

    report = sync.reindex()

    assert report.indexed == 0
    assert sorted(report.failed_ids) == sorted(p.id for p in pubs)


def test_reindex_removes_documents_of_deleted_publications(sync, search_index):
    pub = PublicationFactory()
    search_index.upsert(999_999, {"title": "Deleted long ago"})

    report = sync.reindex()

    assert (report.indexed, report.removed) == (1, 1)
    assert set(search_index.documents) == {pub.id}


def test_reindex_reports_stale_documents_that_could_not_be_removed(runner, caplog):
    class StickyIndex(InMemorySearchIndex):
        def delete_many(self, doc_ids):
            return list(doc_ids)

    index = StickyIndex()
    index.upsert(999_999, {"title": "Orphan"})
    sync = SearchSynchronizer(index=index, runner=runner)

    with caplog.at_level(logging.ERROR):
        report = sync.reindex()

    assert report.removed == 0
    assert 999_999 in index.documents
    assert any(getattr(r, "publication_id", None) == 999_999 for r in caplog.records)


def test_reindex_survives_failure_to_list_indexed_ids(runner):
    class BlindIndex(InMemorySearchIndex):
        def ids(self):
            raise SearchIndexError("scroll expired")

    pub = PublicationFactory()
    index = BlindIndex()
    sync = SearchSynchronizer(index=index, runner=runner)

    report = sync.reindex()

    assert (report.indexed, report.removed) == (1, 0)
    assert pub.id in index.documents


# ----------------------------- Search ------------------------------------- #
def test_search_ranks_by_relevance_then_recency(sync):
    sync.index_publication(_doc(1, "Protein folding", date(2020, 1, 1), abstract="deep learning"))
    sync.index_publication(_doc(2, "Deep learning for proteins", date(2019, 1, 1)))
    sync.index_publication(_doc(3, "Deep learning survey", date(2022, 1, 1)))
    sync.index_publication(_doc(4, "Unrelated", date(2023, 1, 1)))

    out = sync.search(SearchIn(q="deep learning"))

    assert [hit.id for hit in out.items] == [3, 2, 1]
    assert out.meta.total == 3
    assert out.items[0].document["title"] == "Deep learning survey"


def test_search_pages(sync):
    for i in range(1, 6):
        sync.index_publication(_doc(i, f"quantum paper {i}", date(2020, 1, i)))

    out = sync.search(SearchIn(q="quantum", page=2, limit=2))

    assert [hit.id for hit in out.items] == [3, 2]
    assert (out.meta.page, out.meta.pages, out.meta.total) == (2, 3, 5)


def test_search_rejects_blank_query(sync):
    with pytest.raises(ValidationError):
        sync.search(SearchIn(q="   "))


def test_search_outage_raises_sync_error(sync, search_index):
    search_index.available = False

    with pytest.raises(SyncError):
        sync.search(SearchIn(q="anything"))
