# scholarhub/services/auth/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import NoReturn

from scholarhub.services._shared.base import BaseService
from scholarhub.services._shared.dto import Identity
from scholarhub.services._shared.errors import (
    InvalidCredentialsError,
    StorageError,
    UnauthorizedError,
)
from scholarhub.services._shared.ports.revocation_store import (
    RevocationStore,
    RevocationStoreError,
)
from scholarhub.services._shared.ports.token_provider import (
    TokenClaims,
    TokenDecodeError,
    TokenProvider,
)
from scholarhub.services.auth.dto import AuthTokenConfig, LoginIn, SessionTokenOut

log = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthService(BaseService):
    """
    Session token lifecycle: login, issuance, logout and request authorization.

    A session token is valid while it is correctly signed, unexpired, carries
    no purpose tag and has no revocation entry. Revoked and expired tokens
    never become valid again. The service never alters a token; logout only
    writes to the revocation store.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        revocation_store: RevocationStore,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        :param token_provider: Adapter for signing/verifying tokens.
        :param revocation_store: Store holding logout entries.
        :param token_cfg: Token lifetimes.
        """
        super().__init__()
        self.tokens = token_provider
        self.store = revocation_store
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_session_token(self, user_id: int) -> SessionTokenOut:
        """Sign a 7-day token with no purpose tag. The store is not touched."""
        token = self.tokens.create_token(identity=user_id, expires_delta=self.cfg.session_expires)
        return SessionTokenOut(
            access_token=token,
            expires_in=int(self.cfg.session_expires.total_seconds()),
        )

    def login(self, dto: LoginIn) -> SessionTokenOut:
        """
        Verify credentials, record ``last_login`` and issue a session token.

        :raises InvalidCredentialsError: If the email/password pair does not match
            an active account.
        """
        with self.rw_uow() as uow:
            user = uow.users.authenticate(dto.email, dto.password)
            if user is None:
                raise InvalidCredentialsError()
            uow.users.touch_last_login(user, self.now_utc())
            user_id = user.id

        log.info("User %s signed in", user_id)
        return self.issue_session_token(user_id)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def revoke_session_token(self, token: str) -> None:
        """
        Write a revocation entry for ``token``.

        The entry lives for the token's remaining lifetime, capped at the
        session lifetime and at least one second. Revoking an already expired
        token is a no-op. Calling twice only refreshes the same entry.

        :raises UnauthorizedError: If the token cannot be decoded.
        :raises StorageError: If the revocation store is unreachable.
        """
        try:
            claims = self.tokens.decode(token)
        except TokenDecodeError as exc:
            raise UnauthorizedError(exc.reason) from exc

        remaining = claims.remaining(self.now_utc())
        if remaining <= timedelta(0):
            return
        ttl = max(1, int(min(remaining, self.cfg.session_expires).total_seconds()))
        try:
            self.store.revoke(token, ttl_seconds=ttl)
        except RevocationStoreError as exc:
            raise StorageError("revocation_store", str(exc)) from exc

    # ------------------------------------------------------------------ #
    # Authorization
    # ------------------------------------------------------------------ #

    def authorize(self, authorization_header: str | None) -> Identity:
        """
        Resolve the caller of a request from its ``Authorization`` header.

        Checks run cheapest first: header shape, revocation lookup, signature
        and algorithm, expiry, purpose tag. Every rejection is the same
        :class:`UnauthorizedError`; only the logged reason differs.

        :param authorization_header: Raw header value, ``"Bearer <token>"``.
        :returns: Identity carrying the user id and raw token.
        :raises UnauthorizedError: If the token is rejected for any reason.
        :raises StorageError: If the revocation store is unreachable.
        """
        token = self._extract_bearer(authorization_header)

        try:
            revoked = self.store.is_revoked(token)
        except RevocationStoreError as exc:
            raise StorageError("revocation_store", str(exc)) from exc
        if revoked:
            self._reject("revoked")

        try:
            claims = self.tokens.decode(token)
        except TokenDecodeError as exc:
            self._reject(exc.reason)

        if claims.expires_at <= self.now_utc():
            self._reject("expired")
        if claims.purpose is not None:
            self._reject("purpose_mismatch")

        return Identity(user_id=self._coerce_user_id(claims), token=token)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _extract_bearer(self, header: str | None) -> str:
        if not header or not header.startswith(BEARER_PREFIX):
            self._reject("missing_or_malformed_header")
        token = header[len(BEARER_PREFIX) :].strip()
        if not token or " " in token:
            self._reject("missing_or_malformed_header")
        return token

    @staticmethod
    def _reject(reason: str) -> NoReturn:
        log.info("Rejected bearer token: %s", reason)
        raise UnauthorizedError(reason)

    def _coerce_user_id(self, claims: TokenClaims) -> int:
        subject = claims.subject
        if isinstance(subject, str) and subject.isdigit():
            return int(subject)
        self._reject("invalid_subject")

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
