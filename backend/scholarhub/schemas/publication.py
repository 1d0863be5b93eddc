"""Publication and search resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from scholarhub.schemas.common import MetaSchema, PaginationQuerySchema


class PublicationWriteSchema(Schema):
    """
    Payload for creating or fully replacing a publication.

    ``publication_date`` is required on create; the service enforces it so
    the same schema serves both ``POST`` and ``PUT``.
    """

    title = fields.String(required=True, validate=validate.Length(min=1, max=512))
    publication_date = fields.Date(load_default=None)
    abstract = fields.String(load_default=None, allow_none=True)
    doi = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    journal = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    volume = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=50))
    issue = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=50))
    pages = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=50))
    publisher = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(max=255)
    )
    citation_count = fields.Integer(load_default=0, validate=validate.Range(min=0))
    url = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    pdf_path = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    keywords = fields.List(
        fields.String(validate=validate.Length(max=100)), load_default=list
    )
    author_ids = fields.List(fields.Integer(strict=True), load_default=list)


class AuthorRefSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)
    position = fields.Integer(required=True)
    institution = fields.String(allow_none=True)


class PublicationSchema(Schema):
    """Public representation of a publication with its ordered authors."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    abstract = fields.String(allow_none=True)
    doi = fields.String(allow_none=True)
    publication_date = fields.Date(required=True)
    journal = fields.String(allow_none=True)
    volume = fields.String(allow_none=True)
    issue = fields.String(allow_none=True)
    pages = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    citation_count = fields.Integer(required=True)
    url = fields.String(allow_none=True)
    pdf_path = fields.String(allow_none=True)
    authors = fields.List(fields.Nested(AuthorRefSchema))
    keywords = fields.List(fields.String())
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class PublicationListQuerySchema(PaginationQuerySchema):
    """Supported query parameters for listing publications."""

    class Meta:
        unknown = EXCLUDE

    journal = fields.String(load_default=None, validate=validate.Length(min=1, max=255))
    from_date = fields.Date(load_default=None)
    to_date = fields.Date(load_default=None)


class PublicationListSchema(Schema):
    items = fields.List(fields.Nested(PublicationSchema))
    meta = fields.Nested(MetaSchema)


class SearchQuerySchema(PaginationQuerySchema):
    """Query parameters for full-text search."""

    class Meta:
        unknown = EXCLUDE

    q = fields.String(required=True, validate=validate.Length(min=1, max=512))


class SearchHitSchema(Schema):
    id = fields.Integer(required=True)
    score = fields.Float(required=True)
    document = fields.Dict()


class SearchResultSchema(Schema):
    items = fields.List(fields.Nested(SearchHitSchema))
    meta = fields.Nested(MetaSchema)
