"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint

from scholarhub.api.deps import json_body, json_response, require_auth, services, timing
from scholarhub.schemas import (
    LoginSchema,
    PasswordResetConfirmSchema,
    PasswordResetRequestSchema,
    RegisterSchema,
    TokenResponseSchema,
    UserSchema,
)
from scholarhub.services._shared.dto import Identity
from scholarhub.services.auth.dto import (
    LoginIn,
    PasswordResetConfirmIn,
    PasswordResetRequestIn,
)
from scholarhub.services.identity.dto import UserRegisterIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
user_schema = UserSchema()
token_schema = TokenResponseSchema()
reset_request_schema = PasswordResetRequestSchema()
reset_confirm_schema = PasswordResetConfirmSchema()


@bp.post("/register")
@timing
def register():
    """Register a new user and return the created representation."""

    payload = register_schema.load(json_body())
    user = services().identity.register_user(UserRegisterIn(**payload))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a session token."""

    data = login_schema.load(json_body())
    token = services().auth.login(LoginIn(email=data["email"], password=data["password"]))
    return json_response({"data": token_schema.dump(token)})


@bp.post("/logout")
@require_auth
@timing
def logout(identity: Identity):
    """Revoke the bearer token used for this request."""

    services().auth.revoke_session_token(identity.token)
    return "", 204


@bp.get("/me")
@require_auth
@timing
def me(identity: Identity):
    """Return the authenticated user profile."""

    user = services().identity.get_user(identity.user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.post("/password-reset")
@timing
def request_password_reset():
    """
    Request a password-reset token.

    Always answers 202 so the response does not reveal whether the email is
    registered. The token is only included where the environment exposes it.
    """

    data = reset_request_schema.load(json_body())
    out = services().password_reset.request_reset(PasswordResetRequestIn(email=data["email"]))
    body: dict = {"data": {"status": "accepted"}}
    if out.token is not None:
        body["data"]["token"] = out.token
    return json_response(body, status=202)


@bp.post("/password-reset/confirm")
@timing
def confirm_password_reset():
    """Redeem a reset token and set the new password."""

    data = reset_confirm_schema.load(json_body())
    services().password_reset.redeem(
        PasswordResetConfirmIn(token=data["token"], new_password=data["new_password"])
    )
    return "", 204
