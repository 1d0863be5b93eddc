"""Search index synchronization and full-text queries."""

from __future__ import annotations

from .dto import ReindexReport, SearchDocument, SearchHitOut, SearchIn, SearchOut
from .service import SearchSynchronizer

__all__ = [
    "SearchSynchronizer",
    "ReindexReport",
    "SearchDocument",
    "SearchHitOut",
    "SearchIn",
    "SearchOut",
]
