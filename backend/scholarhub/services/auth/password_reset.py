# scholarhub/services/auth/password_reset.py
from __future__ import annotations

import logging
from datetime import UTC, datetime

from scholarhub.core.security import MIN_PASSWORD_LENGTH
from scholarhub.services._shared.base import BaseService
from scholarhub.services._shared.errors import (
    InvalidOrExpiredTokenError,
    StorageError,
    ValidationError,
)
from scholarhub.services._shared.ports.revocation_store import (
    RevocationStore,
    RevocationStoreError,
)
from scholarhub.services._shared.ports.token_provider import TokenDecodeError, TokenProvider
from scholarhub.services.auth.dto import (
    PASSWORD_RESET_PURPOSE,
    AuthTokenConfig,
    PasswordResetConfirmIn,
    PasswordResetOut,
    PasswordResetRequestIn,
)

log = logging.getLogger(__name__)


class PasswordResetService(BaseService):
    """
    Single-use password-reset tokens.

    A reset token is a signed 24-hour token tagged ``password_reset`` plus a
    *pending* entry in the revocation store. The token is redeemable only
    while that entry exists; redemption deletes it, so a second attempt with
    the same token fails even though its signature is still valid.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        revocation_store: RevocationStore,
        token_cfg: AuthTokenConfig | None = None,
        expose_token: bool = False,
    ) -> None:
        """
        :param expose_token: Return the token from :meth:`request_reset`.
            Only for environments without a delivery channel.
        """
        super().__init__()
        self.tokens = token_provider
        self.store = revocation_store
        self.cfg = token_cfg or AuthTokenConfig()
        self.expose_token = expose_token

    def issue_reset_token(self, user_id: int) -> str:
        """
        Sign a reset token for ``user_id`` and record it as pending.

        :raises StorageError: If the pending entry cannot be written.
        """
        token = self.tokens.create_token(
            identity=user_id,
            expires_delta=self.cfg.reset_expires,
            purpose=PASSWORD_RESET_PURPOSE,
        )
        try:
            self.store.add_pending_reset(
                token, ttl_seconds=int(self.cfg.reset_expires.total_seconds())
            )
        except RevocationStoreError as exc:
            raise StorageError("revocation_store", str(exc)) from exc
        return token

    def request_reset(self, dto: PasswordResetRequestIn) -> PasswordResetOut:
        """
        Issue a reset token for the account registered under ``dto.email``.

        Unknown or inactive accounts succeed silently so the endpoint cannot
        reveal which emails exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            user_id = user.id if user is not None and user.is_active else None

        if user_id is None:
            log.info("Password reset requested for unknown account")
            return PasswordResetOut()

        token = self.issue_reset_token(user_id)
        log.info("Password reset token issued for user %s", user_id)
        return PasswordResetOut(token=token if self.expose_token else None)

    def redeem(self, dto: PasswordResetConfirmIn) -> None:
        """
        Replace the password of the token's subject and consume the token.

        The credential update and the deletion of the pending entry succeed
        or fail together: if another request consumed the token first, the
        database transaction is rolled back.

        :raises ValidationError: If the new password is too short.
        :raises InvalidOrExpiredTokenError: If the token is badly signed,
            expired, not a reset token or already consumed.
        :raises StorageError: If the revocation store is unreachable.
        """
        if len(dto.new_password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Password too short",
                {"new_password": [f"Must be at least {MIN_PASSWORD_LENGTH} characters."]},
            )

        try:
            claims = self.tokens.decode(dto.token)
        except TokenDecodeError as exc:
            raise InvalidOrExpiredTokenError(exc.reason) from exc

        if claims.expires_at <= datetime.now(UTC):
            raise InvalidOrExpiredTokenError("expired")
        if claims.purpose != PASSWORD_RESET_PURPOSE:
            raise InvalidOrExpiredTokenError("purpose_mismatch")
        if not claims.subject.isdigit():
            raise InvalidOrExpiredTokenError("invalid_subject")
        user_id = int(claims.subject)

        try:
            if not self.store.is_reset_pending(dto.token):
                raise InvalidOrExpiredTokenError("consumed")

            with self.rw_uow() as uow:
                if uow.users.get(user_id) is None:
                    raise InvalidOrExpiredTokenError("unknown_subject")
                uow.users.update_password(user_id, dto.new_password)
                # Lost a race with a concurrent redemption: roll back.
                if not self.store.consume_reset(dto.token):
                    raise InvalidOrExpiredTokenError("consumed")
        except RevocationStoreError as exc:
            raise StorageError("revocation_store", str(exc)) from exc

        log.info("Password reset for user %s", user_id)
