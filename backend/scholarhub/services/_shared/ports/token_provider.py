from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


class TokenDecodeError(Exception):
    """Raised when a token is malformed, badly signed, expired or uses another algorithm.

    :param reason: Short internal reason, for logs only.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Verified content of a signed token.

    :param subject: Identity the token was issued for.
    :param expires_at: Expiry instant (timezone-aware, UTC).
    :param purpose: Purpose tag; ``None`` for session tokens.
    :param raw: Full decoded payload.
    """

    subject: str
    expires_at: datetime
    purpose: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    def remaining(self, now: datetime) -> timedelta:
        return self.expires_at - now


class TokenProvider(Protocol):
    """Port for issuing and verifying signed, time-bounded tokens."""

    def create_token(
        self,
        *,
        identity: int | str,
        expires_delta: timedelta,
        purpose: str | None = None,
    ) -> str: ...

    def decode(self, token: str) -> TokenClaims:
        """Verify signature and algorithm and return the claims.

        :raises TokenDecodeError: If the token cannot be trusted.
        """
        ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque strings remembered in memory. ``decode`` does not check
    expiry so that callers' own expiry checks can be exercised; pass a
    negative ``expires_delta`` to mint an already-expired token.
    """

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, TokenClaims] = {}

    def create_token(
        self,
        *,
        identity: int | str,
        expires_delta: timedelta,
        purpose: str | None = None,
    ) -> str:
        self._seq += 1
        token = f"{purpose or 'session'}.{identity}.{self._seq}"
        expires_at = self._now + expires_delta
        payload: dict[str, Any] = {"sub": str(identity), "exp": int(expires_at.timestamp())}
        if purpose is not None:
            payload["purpose"] = purpose
        self._issued[token] = TokenClaims(
            subject=str(identity), expires_at=expires_at, purpose=purpose, raw=payload
        )
        return token

    def decode(self, token: str) -> TokenClaims:
        try:
            return self._issued[token]
        except KeyError:
            raise TokenDecodeError("unknown token") from None
