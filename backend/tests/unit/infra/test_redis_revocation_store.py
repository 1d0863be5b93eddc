# tests/unit/infra/test_redis_revocation_store.py
"""
Unit tests for RedisRevocationStore using fakeredis.

These tests exercise the main flows:
- revoke + is_revoked with a TTL
- pending reset entries and single-use consumption
- hashing of raw tokens into keys
- connection errors surfacing as RevocationStoreError
"""

from __future__ import annotations

from unittest import mock

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from scholarhub.infra.redis.redis_revocation_store import RedisRevocationStore
from scholarhub.services._shared.ports import RevocationStoreError


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    yield r
    r.flushall()


@pytest.fixture
def store(fake_redis) -> RedisRevocationStore:
    return RedisRevocationStore(fake_redis)


def test_revoke_sets_entry_with_ttl(store, fake_redis):
    store.revoke("tok-1", ttl_seconds=120)

    assert store.is_revoked("tok-1") is True
    assert store.is_revoked("tok-2") is False
    (key,) = fake_redis.keys("revoked:session:*")
    assert 0 < fake_redis.ttl(key) <= 120


def test_keys_never_contain_raw_token(store, fake_redis):
    store.revoke("very-secret-token", ttl_seconds=60)
    store.add_pending_reset("very-secret-token", ttl_seconds=60)

    for key in fake_redis.keys("*"):
        assert b"very-secret-token" not in key


def test_ttl_is_at_least_one_second(store, fake_redis):
    store.revoke("tok", ttl_seconds=0)

    (key,) = fake_redis.keys("revoked:*")
    assert fake_redis.ttl(key) >= 1


def test_revocation_and_reset_entries_are_separate(store):
    store.revoke("shared", ttl_seconds=60)

    assert store.is_reset_pending("shared") is False


def test_consume_reset_succeeds_once(store):
    store.add_pending_reset("reset-tok", ttl_seconds=3600)
    assert store.is_reset_pending("reset-tok") is True

    assert store.consume_reset("reset-tok") is True
    assert store.consume_reset("reset-tok") is False
    assert store.is_reset_pending("reset-tok") is False


def test_consume_unknown_reset_token(store):
    assert store.consume_reset("never-issued") is False


def test_redis_errors_are_wrapped():
    broken = mock.Mock()
    broken.set.side_effect = RedisConnectionError("refused")
    broken.exists.side_effect = RedisConnectionError("refused")
    broken.delete.side_effect = RedisConnectionError("refused")
    store = RedisRevocationStore(broken)

    with pytest.raises(RevocationStoreError):
        store.revoke("t", ttl_seconds=5)
    with pytest.raises(RevocationStoreError):
        store.is_revoked("t")
    with pytest.raises(RevocationStoreError):
        store.consume_reset("t")
