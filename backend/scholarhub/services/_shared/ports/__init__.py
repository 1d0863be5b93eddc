"""
scholarhub.services._shared.ports
=================================

*Ports* (hexagonal interfaces) the service layer depends on, each with an
in-memory implementation for tests and local runs.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, signs and verifies session and reset tokens.
- :mod:`revocation_store`:
    :class:`~.RevocationStore`, TTL-backed token state (logout and
    single-use reset tokens).
- :mod:`search_index`:
    :class:`~.SearchIndex`, full-text index of publication documents.
- :mod:`task_runner`:
    :class:`~.TaskRunner`, hands work off to run after the request.

Concrete adapters (JWT, Redis, Elasticsearch, thread pool) live under
``scholarhub.infra``.
"""

from __future__ import annotations

from .revocation_store import (
    InMemoryRevocationStore,
    RevocationStore,
    RevocationStoreError,
    token_key,
)
from .search_index import (
    SEARCH_FIELDS,
    InMemorySearchIndex,
    SearchHit,
    SearchIndex,
    SearchIndexError,
    SearchResult,
)
from .task_runner import DeferredTaskRunner, InlineTaskRunner, TaskRunner
from .token_provider import StubTokenProvider, TokenClaims, TokenDecodeError, TokenProvider

__all__ = [
    "TokenProvider",
    "TokenClaims",
    "TokenDecodeError",
    "StubTokenProvider",
    "RevocationStore",
    "RevocationStoreError",
    "InMemoryRevocationStore",
    "token_key",
    "SearchIndex",
    "SearchIndexError",
    "SearchHit",
    "SearchResult",
    "SEARCH_FIELDS",
    "InMemorySearchIndex",
    "TaskRunner",
    "InlineTaskRunner",
    "DeferredTaskRunner",
]
