from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from scholarhub.services._shared.ports.revocation_store import (
    RESET_PREFIX,
    REVOKED_PREFIX,
    RevocationStore,
    RevocationStoreError,
    token_key,
)


@dataclass(slots=True)
class RedisRevocationStore(RevocationStore):
    """
    Redis-backed token state.

    Every entry is a small marker written with ``SET ... EX`` so Redis drops
    it once the token could no longer be valid anyway. Consuming a reset
    token is a single ``DEL``; its reply tells exactly one caller that it
    removed the key.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    def _set(self, key: str, ttl_seconds: int) -> None:
        try:
            # store a small marker with TTL; idempotent
            self.r.set(key, "1", ex=max(1, int(ttl_seconds)))
        except RedisError as exc:
            raise RevocationStoreError(str(exc)) from exc

    def _exists(self, key: str) -> bool:
        try:
            return cast(int, self.r.exists(key)) == 1
        except RedisError as exc:
            raise RevocationStoreError(str(exc)) from exc

    def revoke(self, token: str, *, ttl_seconds: int) -> None:
        self._set(token_key(REVOKED_PREFIX, token), ttl_seconds)

    def is_revoked(self, token: str) -> bool:
        return self._exists(token_key(REVOKED_PREFIX, token))

    def add_pending_reset(self, token: str, *, ttl_seconds: int) -> None:
        self._set(token_key(RESET_PREFIX, token), ttl_seconds)

    def is_reset_pending(self, token: str) -> bool:
        return self._exists(token_key(RESET_PREFIX, token))

    def consume_reset(self, token: str) -> bool:
        try:
            return cast(int, self.r.delete(token_key(RESET_PREFIX, token))) == 1
        except RedisError as exc:
            raise RevocationStoreError(str(exc)) from exc
