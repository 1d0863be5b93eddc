# tests/integration/test_api_publications.py
from __future__ import annotations

import pytest

from tests.factories.publication import AuthorFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import problem, session_headers

BASE = "/api/v1/publications"


@pytest.fixture()
def auth_headers(client):
    return session_headers(client, UserFactory().email)


def _payload(**overrides):
    body = {
        "title": "Attention Is All You Need",
        "publication_date": "2017-06-12",
        "journal": "NeurIPS",
        "doi": "10.5555/3295222.3295349",
    }
    body.update(overrides)
    return body


def test_write_requires_authentication(client):
    assert client.post(BASE, json=_payload()).status_code == 401
    assert client.put(f"{BASE}/1", json=_payload()).status_code == 401
    assert client.delete(f"{BASE}/1").status_code == 401


def test_create_get_update_delete(client, auth_headers, search_index):
    a1, a2, a3 = AuthorFactory(), AuthorFactory(), AuthorFactory()

    res = client.post(
        BASE,
        json=_payload(author_ids=[a1.id, a3.id], keywords=["ml", "nlp"]),
        headers=auth_headers,
    )
    assert res.status_code == 201
    created = res.get_json()["data"]
    pub_id = created["id"]
    assert res.headers["Location"].endswith(f"/publications/{pub_id}")
    assert [a["id"] for a in created["authors"]] == [a1.id, a3.id]
    assert created["keywords"] == ["ml", "nlp"]
    assert search_index.documents[pub_id]["keywords"] == ["ml", "nlp"]

    fetched = client.get(f"{BASE}/{pub_id}").get_json()["data"]
    assert fetched["publication_date"] == "2017-06-12"
    assert [a["position"] for a in fetched["authors"]] == [0, 1]

    res = client.put(
        f"{BASE}/{pub_id}",
        json=_payload(title="Attention, revisited", author_ids=[a2.id], keywords=["nlp"]),
        headers=auth_headers,
    )
    assert res.status_code == 200
    updated = res.get_json()["data"]
    assert [a["id"] for a in updated["authors"]] == [a2.id]
    assert updated["keywords"] == ["nlp"]
    assert search_index.documents[pub_id]["title"] == "Attention, revisited"

    assert client.delete(f"{BASE}/{pub_id}", headers=auth_headers).status_code == 204
    assert client.get(f"{BASE}/{pub_id}").status_code == 404
    assert pub_id not in search_index.documents


def test_create_with_unknown_author_is_404_and_writes_nothing(client, auth_headers, session):
    author = AuthorFactory()
    session.commit()

    res = client.post(BASE, json=_payload(author_ids=[author.id, 987654]), headers=auth_headers)

    assert res.status_code == 404
    assert "Author" in res.get_json()["detail"]
    listing = client.get(BASE).get_json()
    assert listing["meta"]["total"] == 0


def test_create_validation_errors(client, auth_headers):
    res = client.post(
        BASE,
        json={"title": "", "citation_count": -3, "author_ids": ["x"]},
        headers=auth_headers,
    )

    assert res.status_code == 422
    errors = problem(res)["details"]["errors"]
    assert {"title", "citation_count", "author_ids"} <= set(errors)


def test_create_without_date_is_rejected(client, auth_headers):
    body = _payload()
    body.pop("publication_date")

    res = client.post(BASE, json=body, headers=auth_headers)

    assert res.status_code == 422


def test_duplicate_doi_conflicts(client, auth_headers):
    assert client.post(BASE, json=_payload(), headers=auth_headers).status_code == 201

    res = client.post(BASE, json=_payload(title="Copy"), headers=auth_headers)

    assert res.status_code == 409
    assert problem(res)["code"] == "conflict"


def test_list_and_filter(client, auth_headers):
    for title, journal, day in [
        ("A", "Nature", "2020-01-01"),
        ("B", "Nature", "2022-01-01"),
        ("C", "Science", "2021-01-01"),
    ]:
        client.post(
            BASE,
            json=_payload(title=title, journal=journal, publication_date=day, doi=None),
            headers=auth_headers,
        )

    res = client.get(f"{BASE}?journal=Nature&limit=1")
    body = res.get_json()
    assert [p["title"] for p in body["data"]] == ["B"]
    assert body["meta"] == {"total": 2, "page": 1, "limit": 1, "pages": 2}

    res = client.get(f"{BASE}?from_date=2021-01-01")
    assert [p["title"] for p in res.get_json()["data"]] == ["B", "C"]


def test_search(client, auth_headers):
    client.post(
        BASE,
        json=_payload(title="Graph neural networks", doi=None, keywords=["graphs"]),
        headers=auth_headers,
    )
    client.post(
        BASE, json=_payload(title="Protein folding", doi=None), headers=auth_headers
    )

    res = client.get(f"{BASE}/search?q=graphs")
    assert res.status_code == 200
    body = res.get_json()
    assert [hit["document"]["title"] for hit in body["data"]] == ["Graph neural networks"]
    assert body["meta"]["total"] == 1


def test_search_requires_query(client):
    assert client.get(f"{BASE}/search").status_code == 422


def test_search_outage_is_503_but_writes_succeed(client, auth_headers, search_index):
    search_index.available = False

    created = client.post(BASE, json=_payload(doi=None), headers=auth_headers)
    assert created.status_code == 201

    res = client.get(f"{BASE}/search?q=attention")
    assert res.status_code == 503
    assert res.get_json()["code"] == "service_unavailable"
