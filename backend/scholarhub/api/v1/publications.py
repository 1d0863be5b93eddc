"""Publication endpoints: relational CRUD plus full-text search."""

from __future__ import annotations

from flask import Blueprint, request

from scholarhub.api.deps import json_body, json_response, require_auth, services, timing
from scholarhub.schemas import (
    PublicationListQuerySchema,
    PublicationListSchema,
    PublicationSchema,
    PublicationWriteSchema,
    SearchQuerySchema,
    SearchResultSchema,
)
from scholarhub.services._shared.dto import Identity
from scholarhub.services.publications.dto import PublicationListIn, PublicationWriteIn
from scholarhub.services.search.dto import SearchIn

bp = Blueprint("publications", __name__, url_prefix="/publications")

publication_schema = PublicationSchema()
publication_list_schema = PublicationListSchema()
write_schema = PublicationWriteSchema()
list_query_schema = PublicationListQuerySchema()
search_query_schema = SearchQuerySchema()
search_result_schema = SearchResultSchema()


@bp.get("")
@timing
def list_publications():
    """Return publications newest first, optionally filtered by journal and dates."""

    params = list_query_schema.load(request.args)
    out = services().publications.list_publications(PublicationListIn(**params))
    dumped = publication_list_schema.dump(out)
    return json_response({"data": dumped["items"], "meta": dumped["meta"]})


@bp.get("/search")
@timing
def search_publications():
    """Relevance-ranked full-text search over the search index."""

    params = search_query_schema.load(request.args)
    out = services().search.search(SearchIn(**params))
    dumped = search_result_schema.dump(out)
    return json_response({"data": dumped["items"], "meta": dumped["meta"]})


@bp.get("/<int:publication_id>")
@timing
def get_publication(publication_id: int):
    """Return one publication with its ordered authors and keywords."""

    out = services().publications.get(publication_id)
    return json_response({"data": publication_schema.dump(out)})


@bp.post("")
@require_auth
@timing
def create_publication(identity: Identity):
    """Create a publication with its author and keyword associations."""

    payload = write_schema.load(json_body())
    out = services().publications.create(PublicationWriteIn(**payload))
    response = json_response({"data": publication_schema.dump(out)}, status=201)
    response.headers["Location"] = f"{request.base_url.rstrip('/')}/{out.id}"
    return response


@bp.put("/<int:publication_id>")
@require_auth
@timing
def update_publication(publication_id: int, identity: Identity):
    """Fully replace a publication, its authors and its keywords."""

    payload = write_schema.load(json_body())
    out = services().publications.update(publication_id, PublicationWriteIn(**payload))
    return json_response({"data": publication_schema.dump(out)})


@bp.delete("/<int:publication_id>")
@require_auth
@timing
def delete_publication(publication_id: int, identity: Identity):
    """Delete a publication and schedule removal of its search document."""

    services().publications.delete(publication_id)
    return "", 204
