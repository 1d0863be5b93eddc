# scholarhub/infra/search/elasticsearch_index.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from elasticsearch import ApiError, Elasticsearch, NotFoundError, TransportError, helpers

from scholarhub.services._shared.ports.search_index import (
    SEARCH_FIELDS,
    SearchHit,
    SearchIndex,
    SearchIndexError,
    SearchResult,
)

log = logging.getLogger(__name__)

#: Document mapping for the publications index.
PUBLICATION_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "integer"},
        "title": {"type": "text"},
        "abstract": {"type": "text"},
        "doi": {"type": "keyword"},
        "publication_date": {"type": "date", "format": "yyyy-MM-dd"},
        "journal": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
        "volume": {"type": "keyword"},
        "issue": {"type": "keyword"},
        "pages": {"type": "keyword"},
        "publisher": {"type": "text"},
        "citation_count": {"type": "integer"},
        "url": {"type": "keyword", "index": False},
        "authors": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
        "keywords": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
    }
}

_ENGINE_ERRORS = (ApiError, TransportError)


@dataclass(slots=True)
class ElasticsearchIndex(SearchIndex):
    """
    Elasticsearch 8 adapter for the publication search index.

    Documents are stored under the publication id, so indexing the same
    publication twice replaces the previous document.

    :param client: Configured :class:`elasticsearch.Elasticsearch` client.
    :param index_name: Target index.
    """

    client: Elasticsearch
    index_name: str = "publications"

    def ensure_index(self) -> None:
        try:
            if self.client.indices.exists(index=self.index_name):
                return
            self.client.indices.create(index=self.index_name, mappings=PUBLICATION_MAPPINGS)
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"ensure_index failed: {exc}") from exc
        log.info("Created search index %s", self.index_name)

    def upsert(self, doc_id: int, document: Mapping[str, Any]) -> None:
        try:
            self.client.index(index=self.index_name, id=str(doc_id), document=dict(document))
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"index {doc_id} failed: {exc}") from exc

    def upsert_many(self, documents: Mapping[int, Mapping[str, Any]]) -> list[int]:
        if not documents:
            return []
        actions = (
            {"_op_type": "index", "_index": self.index_name, "_id": str(doc_id), "_source": dict(doc)}
            for doc_id, doc in documents.items()
        )
        try:
            _, errors = helpers.bulk(self.client, actions, raise_on_error=False)
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"bulk index failed: {exc}") from exc

        rejected: list[int] = []
        for item in errors:  # type: ignore[union-attr]
            info = next(iter(item.values()), {})
            rejected.append(int(info.get("_id")))
        return rejected

    def delete(self, doc_id: int) -> None:
        try:
            self.client.delete(index=self.index_name, id=str(doc_id))
        except NotFoundError:
            return
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"delete {doc_id} failed: {exc}") from exc

    def delete_many(self, doc_ids: Iterable[int]) -> list[int]:
        actions = [
            {"_op_type": "delete", "_index": self.index_name, "_id": str(doc_id)}
            for doc_id in doc_ids
        ]
        if not actions:
            return []
        try:
            _, errors = helpers.bulk(self.client, actions, raise_on_error=False)
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"bulk delete failed: {exc}") from exc

        failed: list[int] = []
        for item in errors:  # type: ignore[union-attr]
            info = next(iter(item.values()), {})
            if info.get("status") == 404:
                continue
            failed.append(int(info.get("_id")))
        return failed

    def ids(self) -> list[int]:
        try:
            hits = helpers.scan(
                self.client,
                index=self.index_name,
                query={"query": {"match_all": {}}},
                _source=False,
            )
            return sorted(int(hit["_id"]) for hit in hits)
        except NotFoundError:
            return []
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"listing ids failed: {exc}") from exc

    def search(self, query: str, *, offset: int, size: int) -> SearchResult:
        try:
            response = self.client.search(
                index=self.index_name,
                query={
                    "multi_match": {
                        "query": query,
                        "fields": list(SEARCH_FIELDS),
                        "type": "best_fields",
                        "fuzziness": "AUTO",
                    }
                },
                sort=[{"_score": {"order": "desc"}}, {"publication_date": {"order": "desc"}}],
                track_scores=True,
                from_=offset,
                size=size,
            )
        except NotFoundError:
            # Nothing indexed yet.
            return SearchResult(hits=[], total=0)
        except _ENGINE_ERRORS as exc:
            raise SearchIndexError(f"search failed: {exc}") from exc

        hits_block = response["hits"]
        total = hits_block.get("total") or {}
        hits = [
            SearchHit(
                id=int(hit["_id"]),
                score=float(hit.get("_score") or 0.0),
                source=dict(hit.get("_source") or {}),
            )
            for hit in hits_block.get("hits", [])
        ]
        return SearchResult(hits=hits, total=int(total.get("value", len(hits))))
