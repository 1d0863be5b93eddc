# tests/unit/infra/test_elasticsearch_index.py
"""Unit tests for ElasticsearchIndex against a mocked client."""

from __future__ import annotations

from unittest import mock

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch import NotFoundError
from scholarhub.infra.search import elasticsearch_index as es_module
from scholarhub.infra.search.elasticsearch_index import PUBLICATION_MAPPINGS, ElasticsearchIndex
from scholarhub.services._shared.ports import SearchIndexError


def _not_found() -> NotFoundError:
    return NotFoundError("not_found", mock.Mock(status=404), {"found": False})


@pytest.fixture
def client():
    return mock.MagicMock(name="Elasticsearch")


@pytest.fixture
def index(client) -> ElasticsearchIndex:
    return ElasticsearchIndex(client=client, index_name="pubs-test")


def test_ensure_index_creates_missing_index(index, client):
    client.indices.exists.return_value = False

    index.ensure_index()

    client.indices.create.assert_called_once_with(index="pubs-test", mappings=PUBLICATION_MAPPINGS)


def test_ensure_index_is_noop_when_present(index, client):
    client.indices.exists.return_value = True

    index.ensure_index()

    client.indices.create.assert_not_called()


def test_upsert_uses_publication_id_as_document_id(index, client):
    index.upsert(17, {"title": "T"})

    client.index.assert_called_once_with(index="pubs-test", id="17", document={"title": "T"})


def test_upsert_wraps_transport_errors(index, client):
    client.index.side_effect = ESConnectionError("connection refused")

    with pytest.raises(SearchIndexError):
        index.upsert(1, {"title": "T"})


def test_delete_ignores_missing_document(index, client):
    client.delete.side_effect = _not_found()

    index.delete(99)

    client.delete.assert_called_once_with(index="pubs-test", id="99")


def test_delete_wraps_transport_errors(index, client):
    client.delete.side_effect = ESConnectionError("timeout")

    with pytest.raises(SearchIndexError):
        index.delete(1)


def test_upsert_many_returns_rejected_ids(index, client):
    errors = [{"index": {"_id": "2", "status": 400, "error": {"type": "mapper_parsing_exception"}}}]
    with mock.patch.object(es_module.helpers, "bulk", return_value=(1, errors)) as bulk:
        rejected = index.upsert_many({1: {"title": "a"}, 2: {"title": "b"}})

    assert rejected == [2]
    actions = list(bulk.call_args.args[1])
    assert [a["_id"] for a in actions] == ["1", "2"]
    assert all(a["_index"] == "pubs-test" and a["_op_type"] == "index" for a in actions)
    assert bulk.call_args.kwargs["raise_on_error"] is False


def test_upsert_many_skips_empty_batches(index):
    with mock.patch.object(es_module.helpers, "bulk") as bulk:
        assert index.upsert_many({}) == []
    bulk.assert_not_called()


def test_delete_many_ignores_missing_documents(index):
    errors = [
        {"delete": {"_id": "4", "status": 404, "result": "not_found"}},
        {"delete": {"_id": "5", "status": 503, "error": {"type": "unavailable_shards_exception"}}},
    ]
    with mock.patch.object(es_module.helpers, "bulk", return_value=(1, errors)) as bulk:
        failed = index.delete_many([3, 4, 5])

    assert failed == [5]
    actions = bulk.call_args.args[1]
    assert [a["_id"] for a in actions] == ["3", "4", "5"]
    assert all(a["_op_type"] == "delete" for a in actions)


def test_delete_many_wraps_transport_errors(index):
    with mock.patch.object(es_module.helpers, "bulk", side_effect=ESConnectionError("down")):
        with pytest.raises(SearchIndexError):
            index.delete_many([1])


def test_ids_scans_document_ids_only(index, client):
    hits = [{"_id": "9"}, {"_id": "2"}]
    with mock.patch.object(es_module.helpers, "scan", return_value=iter(hits)) as scan:
        assert index.ids() == [2, 9]

    scan.assert_called_once_with(
        client, index="pubs-test", query={"query": {"match_all": {}}}, _source=False
    )


def test_ids_of_missing_index_is_empty(index):
    with mock.patch.object(es_module.helpers, "scan", side_effect=_not_found()):
        assert index.ids() == []


def test_search_builds_ranked_query_and_parses_hits(index, client):
    client.search.return_value = {
        "hits": {
            "total": {"value": 2, "relation": "eq"},
            "hits": [
                {"_id": "5", "_score": 3.2, "_source": {"title": "Deep nets"}},
                {"_id": "8", "_score": 1.1, "_source": {"title": "Shallow nets"}},
            ],
        }
    }

    result = index.search("nets", offset=10, size=5)

    assert [h.id for h in result.hits] == [5, 8]
    assert result.hits[0].score == pytest.approx(3.2)
    assert result.hits[0].source == {"title": "Deep nets"}
    assert result.total == 2

    kwargs = client.search.call_args.kwargs
    assert kwargs["index"] == "pubs-test"
    assert kwargs["from_"] == 10
    assert kwargs["size"] == 5
    assert kwargs["query"]["multi_match"]["query"] == "nets"
    assert kwargs["query"]["multi_match"]["fuzziness"] == "AUTO"
    assert kwargs["sort"][0] == {"_score": {"order": "desc"}}
    assert kwargs["sort"][1] == {"publication_date": {"order": "desc"}}


def test_search_on_missing_index_is_empty(index, client):
    client.search.side_effect = _not_found()

    result = index.search("anything", offset=0, size=10)

    assert result.hits == []
    assert result.total == 0


def test_search_wraps_transport_errors(index, client):
    client.search.side_effect = ESConnectionError("down")

    with pytest.raises(SearchIndexError):
        index.search("anything", offset=0, size=10)
