"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from scholarhub.core.security import MIN_PASSWORD_LENGTH


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(
        required=True, validate=validate.Length(min=MIN_PASSWORD_LENGTH, max=128)
    )
    institution = fields.String(load_default=None, validate=validate.Length(max=255))
    biography = fields.String(load_default=None)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenResponseSchema(Schema):
    """Response payload containing a session token."""

    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="Bearer")
    expires_in = fields.Integer(required=True)


class PasswordResetRequestSchema(Schema):
    """Input payload asking for a password-reset token."""

    email = fields.Email(required=True, validate=validate.Length(max=254))


class PasswordResetConfirmSchema(Schema):
    """Input payload redeeming a password-reset token."""

    token = fields.String(required=True, validate=validate.Length(min=1))
    new_password = fields.String(
        required=True, validate=validate.Length(min=MIN_PASSWORD_LENGTH, max=128)
    )
