# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param page: Current page (1-based).
    :param limit: Page size.
    :param total: Total rows available.
    :param pages: Number of pages for ``total`` at ``limit`` per page.
    """

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> PageMeta:
        pages = (total + limit - 1) // limit if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, pages=pages)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller resolved from a session token.

    Passed explicitly to every operation that needs to know who is acting.

    :param user_id: Subject of the token.
    :param token: The raw bearer token, needed to revoke it on logout.
    """

    user_id: int
    token: str
