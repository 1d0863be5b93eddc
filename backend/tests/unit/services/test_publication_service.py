# tests/unit/services/test_publication_service.py
from __future__ import annotations

import logging
from datetime import date

import pytest
from scholarhub.models import Keyword, Publication, PublicationAuthor, PublicationKeyword
from scholarhub.repositories.publication import PublicationRepository
from scholarhub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from scholarhub.services.publications.dto import PublicationListIn, PublicationWriteIn
from scholarhub.services.publications.service import PublicationService
from scholarhub.services.search.service import SearchSynchronizer

from tests.factories.publication import AuthorFactory, KeywordFactory, PublicationFactory
from tests.helpers.utils import not_raises


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def sync(search_index, runner) -> SearchSynchronizer:
    return SearchSynchronizer(index=search_index, runner=runner)


@pytest.fixture()
def service(sync) -> PublicationService:
    """PublicationService wired to the in-memory index and an inline runner."""
    return PublicationService(synchronizer=sync)


def _write(**overrides) -> PublicationWriteIn:
    data = {"title": "Attention Is All You Need", "publication_date": "2017-06-12"}
    data.update(overrides)
    return PublicationWriteIn(**data)


# ------------------------------- Create ----------------------------------- #
def test_create_stores_authors_in_given_order_and_keywords(service, search_index):
    a1, a2, a3 = AuthorFactory(), AuthorFactory(), AuthorFactory()

    out = service.create(
        _write(author_ids=[a1.id, a3.id], keywords=["ml", "nlp"], doi="10.1/attn")
    )

    assert [a.id for a in out.authors] == [a1.id, a3.id]
    assert [a.position for a in out.authors] == [0, 1]
    assert out.keywords == ["ml", "nlp"]
    assert a2.id not in [a.id for a in out.authors]

    # The committed row is mirrored once the job has run.
    doc = search_index.documents[out.id]
    assert doc["authors"] == [a1.name, a3.name]
    assert doc["keywords"] == ["ml", "nlp"]
    assert doc["publication_date"] == "2017-06-12"


def test_create_collapses_duplicate_keywords_and_reuses_existing_rows(service, db):
    KeywordFactory(name="ml")

    out = service.create(_write(keywords=[" ml", "nlp", "ml ", "nlp"]))

    assert out.keywords == ["ml", "nlp"]
    assert db.session.query(Keyword).filter(Keyword.name == "ml").count() == 1


def test_create_normalizes_blank_doi_to_null(service):
    out = service.create(_write(doi="   "))
    assert out.doi is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"publication_date": "12/06/2017"},
        {"publication_date": None},
        {"citation_count": -1},
        {"keywords": ["ok", "  "]},
        {"author_ids": [1, 1]},
    ],
)
def test_create_rejects_invalid_input(service, db, overrides):
    before = db.session.query(Publication).count()

    with pytest.raises(ValidationError):
        service.create(_write(**overrides))

    assert db.session.query(Publication).count() == before


def test_create_with_missing_author_leaves_no_rows(service, db, session, search_index):
    """A missing author aborts the whole write: no publication, no links, no keyword."""
    author = AuthorFactory()
    session.commit()
    counts = PublicationRepository(session=session).count_associations()
    publications = db.session.query(Publication).count()

    with pytest.raises(NotFoundError) as ei:
        service.create(_write(author_ids=[author.id, 999_999], keywords=["fresh-keyword"]))

    assert ei.value.entity == "Author"
    assert ei.value.key == 999_999
    assert db.session.query(Publication).count() == publications
    assert PublicationRepository(session=session).count_associations() == counts
    assert db.session.query(Keyword).filter(Keyword.name == "fresh-keyword").count() == 0
    assert search_index.documents == {}


def test_create_rejects_duplicate_doi(service, session, search_index):
    PublicationFactory(doi="10.1/dup")
    session.commit()

    with pytest.raises(ConflictError):
        service.create(_write(doi="10.1/dup"))

    assert search_index.documents == {}


# ------------------------------- Update ----------------------------------- #
def test_update_replaces_authors_and_keywords(service, db):
    a1, a2, a3 = AuthorFactory(), AuthorFactory(), AuthorFactory()
    created = service.create(_write(author_ids=[a1.id, a2.id], keywords=["old", "shared"]))

    updated = service.update(
        created.id,
        _write(title="Revised", author_ids=[a3.id, a1.id], keywords=["shared", "new"]),
    )

    assert updated.title == "Revised"
    assert [a.id for a in updated.authors] == [a3.id, a1.id]
    assert updated.keywords == ["new", "shared"]
    links = db.session.query(PublicationAuthor).filter_by(publication_id=created.id).count()
    tags = db.session.query(PublicationKeyword).filter_by(publication_id=created.id).count()
    assert (links, tags) == (2, 2)


def test_update_without_date_keeps_stored_date(service):
    created = service.create(_write())

    updated = service.update(created.id, _write(title="Same date", publication_date=None))

    assert updated.publication_date == date(2017, 6, 12)


def test_update_failure_keeps_previous_state(service, session):
    a1 = AuthorFactory()
    created = service.create(_write(author_ids=[a1.id], keywords=["kept"]))

    with pytest.raises(NotFoundError):
        service.update(created.id, _write(title="Lost", author_ids=[999_999], keywords=["x"]))

    current = service.get(created.id)
    assert current.title == created.title
    assert [a.id for a in current.authors] == [a1.id]
    assert current.keywords == ["kept"]


def test_update_missing_publication(service):
    with pytest.raises(NotFoundError):
        service.update(424242, _write())


def test_update_allows_keeping_own_doi(service):
    created = service.create(_write(doi="10.1/own"))

    updated = service.update(created.id, _write(title="New title", doi="10.1/own"))

    assert updated.doi == "10.1/own"


# ------------------------------- Delete ----------------------------------- #
def test_delete_removes_rows_links_and_document(service, db, session, search_index):
    a1 = AuthorFactory()
    created = service.create(_write(author_ids=[a1.id], keywords=["gone"]))
    assert created.id in search_index.documents

    service.delete(created.id)

    assert db.session.get(Publication, created.id) is None
    assert PublicationRepository(session=session).count_associations(created.id) == (0, 0)
    assert created.id not in search_index.documents
    # Keywords are shared vocabulary and stay.
    assert db.session.query(Keyword).filter(Keyword.name == "gone").count() == 1


def test_delete_missing_publication(service):
    with pytest.raises(NotFoundError):
        service.delete(424242)


# --------------------------- Search sync ---------------------------------- #
def test_index_outage_does_not_fail_the_write(service, search_index, caplog):
    search_index.available = False

    with caplog.at_level(logging.ERROR), not_raises(ServiceError):
        out = service.create(_write())

    assert service.get(out.id).title == out.title
    assert search_index.documents == {}
    assert any("failed for publication" in r.getMessage() for r in caplog.records)


def test_sync_runs_only_after_commit(search_index, deferred_runner, db):
    service = PublicationService(
        synchronizer=SearchSynchronizer(index=search_index, runner=deferred_runner)
    )

    out = service.create(_write())

    # Committed and readable, not yet indexed.
    assert db.session.get(Publication, out.id) is not None
    assert search_index.documents == {}
    assert deferred_runner.run_pending() == 1
    assert search_index.documents[out.id]["title"] == out.title


def test_failed_write_schedules_nothing(search_index, deferred_runner):
    service = PublicationService(
        synchronizer=SearchSynchronizer(index=search_index, runner=deferred_runner)
    )

    with pytest.raises(NotFoundError):
        service.create(_write(author_ids=[999_999]))

    assert deferred_runner.pending == []


def test_dropped_job_is_logged(search_index, caplog):
    class FullRunner:
        def submit(self, fn, /, *args, **kwargs):
            return False

        def shutdown(self, wait=True):
            return None

    service = PublicationService(
        synchronizer=SearchSynchronizer(index=search_index, runner=FullRunner())
    )

    with caplog.at_level(logging.ERROR):
        out = service.create(_write())

    assert out.id is not None
    assert any("dropped" in r.getMessage() for r in caplog.records)


# ------------------------------- Queries ---------------------------------- #
def test_get_returns_authors_in_stored_order(service):
    a1, a2 = AuthorFactory(), AuthorFactory()
    created = service.create(_write(author_ids=[a2.id, a1.id]))

    fetched = service.get(created.id)

    assert [a.id for a in fetched.authors] == [a2.id, a1.id]


def test_get_missing_publication(service):
    with pytest.raises(NotFoundError):
        service.get(424242)


def test_list_filters_by_journal_and_date_newest_first(service):
    service.create(_write(title="Old", journal="J", publication_date="2019-01-01"))
    service.create(_write(title="New", journal="J", publication_date="2023-01-01"))
    service.create(_write(title="Other", journal="K", publication_date="2022-01-01"))

    out = service.list_publications(PublicationListIn(journal="J"))
    assert [p.title for p in out.items] == ["New", "Old"]
    assert out.meta.total == 2

    ranged = service.list_publications(
        PublicationListIn(journal="J", from_date=date(2020, 1, 1), to_date=date(2024, 1, 1))
    )
    assert [p.title for p in ranged.items] == ["New"]


def test_list_rejects_inverted_date_range(service):
    with pytest.raises(ValidationError):
        service.list_publications(
            PublicationListIn(from_date=date(2024, 1, 1), to_date=date(2023, 1, 1))
        )
