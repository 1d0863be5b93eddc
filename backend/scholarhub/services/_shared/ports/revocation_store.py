from __future__ import annotations

import hashlib
import threading
import time
from collections.abc import Callable
from typing import Protocol

REVOKED_PREFIX = "revoked:session"
RESET_PREFIX = "reset:pending"


def token_key(prefix: str, token: str) -> str:
    """Return the store key for ``token``.

    Keys embed a SHA-256 digest of the exact token value so that raw bearer
    tokens never appear in the store.
    """
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"{prefix}:{digest}"


class RevocationStoreError(Exception):
    """Raised when the backing key-value store cannot be reached."""


class RevocationStore(Protocol):
    """
    Key-value store for token state, with TTL-based expiry.

    Two entry kinds share the store with opposite meanings:

    * revocation entries: presence means the session token is rejected;
    * pending-reset entries: presence means the reset token is still
      redeemable. Consuming deletes it.

    Every method may raise :class:`RevocationStoreError`.
    """

    def revoke(self, token: str, *, ttl_seconds: int) -> None: ...
    def is_revoked(self, token: str) -> bool: ...
    def add_pending_reset(self, token: str, *, ttl_seconds: int) -> None: ...
    def is_reset_pending(self, token: str) -> bool: ...

    def consume_reset(self, token: str) -> bool:
        """Delete the pending entry; ``True`` only for the caller that removed it."""
        ...


class InMemoryRevocationStore(RevocationStore):
    """Process-local store used in tests and when no ``REDIS_URL`` is set.

    A lock serializes every operation so a consume observed by one thread is
    visible to the next read from any other.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, float] = {}
        self._lock = threading.Lock()

    def _set(self, key: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = self._clock() + max(1, int(ttl_seconds))

    def _exists(self, key: str) -> bool:
        with self._lock:
            expires = self._entries.get(key)
            if expires is None:
                return False
            if expires <= self._clock():
                del self._entries[key]
                return False
            return True

    def revoke(self, token: str, *, ttl_seconds: int) -> None:
        self._set(token_key(REVOKED_PREFIX, token), ttl_seconds)

    def is_revoked(self, token: str) -> bool:
        return self._exists(token_key(REVOKED_PREFIX, token))

    def add_pending_reset(self, token: str, *, ttl_seconds: int) -> None:
        self._set(token_key(RESET_PREFIX, token), ttl_seconds)

    def is_reset_pending(self, token: str) -> bool:
        return self._exists(token_key(RESET_PREFIX, token))

    def consume_reset(self, token: str) -> bool:
        key = token_key(RESET_PREFIX, token)
        with self._lock:
            expires = self._entries.pop(key, None)
        return expires is not None and expires > self._clock()
