from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

#: Field boosts used for relevance ranking, highest first.
SEARCH_FIELDS: tuple[str, ...] = ("title^3", "abstract^2", "authors", "keywords", "journal")


class SearchIndexError(Exception):
    """Raised when the search engine rejects a call or cannot be reached."""


@dataclass(frozen=True, slots=True)
class SearchHit:
    id: int
    score: float
    source: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SearchResult:
    hits: list[SearchHit]
    total: int


class SearchIndex(Protocol):
    """Port over a full-text search engine holding one document per publication."""

    def ensure_index(self) -> None: ...

    def upsert(self, doc_id: int, document: Mapping[str, Any]) -> None:
        """Index ``document`` under ``doc_id``, fully replacing any previous one."""
        ...

    def upsert_many(self, documents: Mapping[int, Mapping[str, Any]]) -> list[int]:
        """Index several documents in one round trip.

        :returns: Ids of the documents the engine rejected.
        """
        ...

    def delete(self, doc_id: int) -> None:
        """Remove the document; a missing document is not an error."""
        ...

    def delete_many(self, doc_ids: Iterable[int]) -> list[int]:
        """Remove several documents in one round trip.

        :returns: Ids the engine failed to delete. Missing documents are not
            failures.
        """
        ...

    def ids(self) -> list[int]:
        """Return the id of every indexed document."""
        ...

    def search(self, query: str, *, offset: int, size: int) -> SearchResult:
        """Return hits ranked by relevance, then by ``publication_date`` desc."""
        ...


def _boosts() -> list[tuple[str, float]]:
    out: list[tuple[str, float]] = []
    for entry in SEARCH_FIELDS:
        name, _, boost = entry.partition("^")
        out.append((name, float(boost or 1)))
    return out


class InMemorySearchIndex(SearchIndex):
    """Dictionary-backed index for tests and for running without Elasticsearch.

    Scoring counts case-insensitive term occurrences per field weighted by the
    same boosts the Elasticsearch query uses. No fuzzy matching.

    Setting ``available = False`` makes every call raise
    :class:`SearchIndexError`, which simulates an outage.
    """

    def __init__(self) -> None:
        self.documents: dict[int, dict[str, Any]] = {}
        self.available = True
        self._lock = threading.Lock()

    def _check(self) -> None:
        if not self.available:
            raise SearchIndexError("search engine unavailable")

    def ensure_index(self) -> None:
        self._check()

    def upsert(self, doc_id: int, document: Mapping[str, Any]) -> None:
        self._check()
        with self._lock:
            self.documents[int(doc_id)] = dict(document)

    def upsert_many(self, documents: Mapping[int, Mapping[str, Any]]) -> list[int]:
        self._check()
        with self._lock:
            for doc_id, document in documents.items():
                self.documents[int(doc_id)] = dict(document)
        return []

    def delete(self, doc_id: int) -> None:
        self._check()
        with self._lock:
            self.documents.pop(int(doc_id), None)

    def delete_many(self, doc_ids: Iterable[int]) -> list[int]:
        self._check()
        with self._lock:
            for doc_id in doc_ids:
                self.documents.pop(int(doc_id), None)
        return []

    def ids(self) -> list[int]:
        self._check()
        with self._lock:
            return sorted(self.documents)

    def search(self, query: str, *, offset: int, size: int) -> SearchResult:
        self._check()
        terms = [t for t in query.lower().split() if t]
        with self._lock:
            docs = list(self.documents.items())

        scored: list[SearchHit] = []
        for doc_id, doc in docs:
            score = 0.0
            for name, boost in _boosts():
                value = doc.get(name)
                text = " ".join(value) if isinstance(value, list) else str(value or "")
                text = text.lower()
                score += boost * sum(text.count(term) for term in terms)
            if score > 0:
                scored.append(SearchHit(id=doc_id, score=score, source=dict(doc)))

        scored.sort(key=lambda h: str(h.source.get("publication_date") or ""), reverse=True)
        scored.sort(key=lambda h: h.score, reverse=True)
        return SearchResult(hits=scored[offset : offset + size], total=len(scored))
