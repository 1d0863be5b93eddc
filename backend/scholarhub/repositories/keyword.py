"""Keyword repository exposing find-or-create helpers.

Keywords are shared across publications and created lazily the first time
a name is used. They are never deleted by the publication write path.
"""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError

from scholarhub.models.publication import Keyword
from scholarhub.repositories.base import BaseRepository


class KeywordRepository(BaseRepository[Keyword]):
    """Persist :class:`Keyword` rows."""

    model = Keyword

    def get_by_name(self, name: str) -> Keyword | None:
        """Return a keyword by its unique name.

        :param name: Exact keyword name.
        :returns: Matching keyword or ``None`` when absent.
        """
        stmt: Select[Any] = select(self.model).where(self.model.name == name)
        return cast(Keyword | None, self.session.execute(stmt).scalars().first())

    def ensure(self, name: str) -> Keyword:
        """Return the keyword called ``name``, creating it when missing.

        :param name: Keyword name; surrounding whitespace is trimmed.
        :returns: Existing or newly flushed keyword.
        :raises ValueError: If the name is empty after trimming.
        """
        n = name.strip()
        if not n:
            raise ValueError("keyword name cannot be empty.")
        found = self.get_by_name(n)
        if found is not None:
            return found
        kw = Keyword(name=n)
        try:
            # SAVEPOINT: losing a creation race must not abort the caller's transaction.
            with self.session.begin_nested():
                self.session.add(kw)
        except IntegrityError:
            found = self.get_by_name(n)
            if found is None:
                raise
            return found
        return kw
