import pytest
from scholarhub.models import Publication
from scholarhub.uow import (
    SQLAlchemyReadOnlyUnitOfWork as ROuow,
)
from scholarhub.uow import (
    SQLAlchemyUnitOfWork as RWuow,
)
from sqlalchemy import text

from tests.factories.publication import PublicationFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app, db, session):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(PublicationFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, app, db, session):
        """
        Raw SQL DML is blocked inside the RO UoW, whatever the dialect.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM publication_keywords"))

    def test_allows_reads(self, app, db, session):
        with RWuow() as uow:
            uow.publications.add(PublicationFactory.build())

        with ROuow() as uow:
            assert uow.session.query(Publication).count() >= 1

    def test_disallows_commit(self, app, db, session):
        """
        RO UoW must reject commit().
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_are_removed_on_exit(self, app, db, session):
        with ROuow():
            pass

        with RWuow() as uow:
            pub = uow.publications.add(PublicationFactory.build())

        assert db.session.get(Publication, pub.id) is not None

    def test_always_rolls_back_changes(self, app, db, session):
        """
        Any attempted modifications must not persist after RO UoW exits.
        """
        with RWuow() as uow:
            pub = uow.publications.add(PublicationFactory.build(title="Original"))
            pub_id = pub.id

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            p = uow.session.get(Publication, pub_id)
            p.title = "mutated-in-ro"
            uow.session.flush()

        with RWuow() as uow:
            assert uow.session.get(Publication, pub_id).title == "Original"
