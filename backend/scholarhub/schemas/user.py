"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    institution = fields.String(allow_none=True)
    biography = fields.String(allow_none=True)
    profile_image_url = fields.String(allow_none=True)
    date_joined = fields.DateTime(allow_none=True)
    last_login = fields.DateTime(allow_none=True)
