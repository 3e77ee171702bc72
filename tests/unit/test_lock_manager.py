"""Tests for LockManager.

Tests cover:
- Lease acquisition and conflicts
- Ownership-checked release
- Quiet release after the handler has run
"""

import threading
from unittest.mock import MagicMock

import pytest

from warden.backends import InMemoryBackend
from warden.exceptions import BackendError, BackendUnavailableError, LockConflict
from warden.lock import LockManager


@pytest.fixture
def locks(backend: InMemoryBackend) -> LockManager:
    return LockManager(backend, default_duration=30, key_prefix="idempotency")


class TestLockKey:
    def test_builds_prefixed_key(self, locks: LockManager) -> None:
        assert locks.lock_key("fp") == "idempotency:lock:fp"


class TestAcquire:
    """Tests for acquire()."""

    def test_returns_token_and_stores_it(self, locks: LockManager, backend: InMemoryBackend) -> None:
        token = locks.acquire("fp", 10)

        assert len(token) == 32
        assert backend.get("idempotency:lock:fp") == token.encode()

    def test_tokens_are_unique(self, backend: InMemoryBackend) -> None:
        first = LockManager(backend).acquire("fp-1")
        second = LockManager(backend).acquire("fp-2")
        assert first != second

    def test_applies_duration(self, locks: LockManager, backend: InMemoryBackend) -> None:
        locks.acquire("fp", 10)
        remaining = backend.ttl("idempotency:lock:fp")
        assert remaining is not None
        assert 9 < remaining <= 10

    def test_uses_default_duration(self, locks: LockManager, backend: InMemoryBackend) -> None:
        locks.acquire("fp")
        remaining = backend.ttl("idempotency:lock:fp")
        assert remaining is not None
        assert 29 < remaining <= 30

    def test_conflict_when_already_held(self, locks: LockManager, backend: InMemoryBackend) -> None:
        backend.set("idempotency:lock:fp", "someone-else")

        with pytest.raises(LockConflict) as exc_info:
            locks.acquire("fp", 10)

        assert exc_info.value.fingerprint == "fp"
        assert backend.get("idempotency:lock:fp") == b"someone-else"

    def test_different_fingerprints_do_not_conflict(self, locks: LockManager) -> None:
        locks.acquire("fp-1", 10)
        locks.acquire("fp-2", 10)

    def test_backend_unavailable_propagates(self) -> None:
        backend = MagicMock()
        backend.set_if_absent.side_effect = BackendUnavailableError("down")

        with pytest.raises(BackendUnavailableError):
            LockManager(backend).acquire("fp", 10)

    def test_concurrent_acquire_has_one_winner(self, locks: LockManager) -> None:
        barrier = threading.Barrier(2)
        outcomes: list[str] = []

        def contend() -> None:
            barrier.wait()
            try:
                locks.acquire("fp", 10)
                outcomes.append("acquired")
            except LockConflict:
                outcomes.append("conflict")

        threads = [threading.Thread(target=contend) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["acquired", "conflict"]


class TestRelease:
    """Tests for release()."""

    def test_deletes_own_lease(self, locks: LockManager, backend: InMemoryBackend) -> None:
        token = locks.acquire("fp", 10)

        locks.release("fp", token)

        assert backend.get("idempotency:lock:fp") is None

    def test_keeps_lease_of_other_owner(self, locks: LockManager, backend: InMemoryBackend) -> None:
        """Releasing with a stale token never deletes another holder's lease."""
        backend.set("idempotency:lock:fp", "token-b")

        with pytest.raises(LockConflict):
            locks.release("fp", "token-a")

        assert backend.get("idempotency:lock:fp") == b"token-b"

    def test_conflict_when_lease_gone(self, locks: LockManager) -> None:
        with pytest.raises(LockConflict):
            locks.release("fp", "token-a")

    def test_lease_can_be_reacquired_after_release(self, locks: LockManager) -> None:
        token = locks.acquire("fp", 10)
        locks.release("fp", token)
        assert locks.acquire("fp", 10) != token


class TestReleaseQuietly:
    """Tests for release_quietly()."""

    def test_releases_own_lease(self, locks: LockManager, backend: InMemoryBackend) -> None:
        token = locks.acquire("fp", 10)
        locks.release_quietly("fp", token)
        assert backend.get("idempotency:lock:fp") is None

    def test_swallows_ownership_mismatch(self, locks: LockManager, backend: InMemoryBackend) -> None:
        backend.set("idempotency:lock:fp", "token-b")

        locks.release_quietly("fp", "token-a")

        assert backend.get("idempotency:lock:fp") == b"token-b"

    def test_swallows_backend_unavailable(self) -> None:
        backend = MagicMock()
        backend.compare_and_delete.side_effect = BackendUnavailableError("down")

        LockManager(backend).release_quietly("fp", "token")

        backend.compare_and_delete.assert_called_once_with("idempotency:lock:fp", "token")

    def test_swallows_error_reply(self) -> None:
        backend = MagicMock()
        backend.compare_and_delete.side_effect = BackendError("READONLY")

        LockManager(backend).release_quietly("fp", "token")

        backend.compare_and_delete.assert_called_once()
