"""Author repository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select

from scholarhub.models.publication import Author
from scholarhub.repositories.base import BaseRepository


class AuthorRepository(BaseRepository[Author]):
    """Read access to the author catalog."""

    model = Author

    def get_many(self, author_ids: Iterable[int]) -> dict[int, Author]:
        """Return the existing authors among ``author_ids`` keyed by id.

        Missing ids are simply absent from the result.
        """
        ids = list(author_ids)
        if not ids:
            return {}
        rows = self.session.execute(select(Author).where(Author.id.in_(ids))).scalars()
        return {a.id: a for a in rows}
