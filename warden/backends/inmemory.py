"""In-memory key-value backend for testing and single-process use."""

import threading
import time

from warden.backends.base import KeyValueBackend, to_bytes


class InMemoryBackend(KeyValueBackend):
    """Thread-safe dictionary backend with lazy expiry.

    Every primitive runs under one lock, which makes set_if_absent and
    compare_and_delete atomic across threads of a single process.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, tuple[bytes, float | None]] = {}

    def _live(self, key: str) -> bytes | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._data[key]
            return None
        return value

    @staticmethod
    def _expiry(ttl_seconds: int | None) -> float | None:
        return None if ttl_seconds is None else time.monotonic() + ttl_seconds

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._live(key)

    def set(self, key: str, value: bytes | str, ttl_seconds: int | None = None) -> None:
        with self._lock:
            self._data[key] = (to_bytes(value), self._expiry(ttl_seconds))

    def set_if_absent(self, key: str, value: bytes | str, ttl_seconds: int) -> bool:
        with self._lock:
            if self._live(key) is not None:
                return False
            self._data[key] = (to_bytes(value), self._expiry(ttl_seconds))
            return True

    def compare_and_delete(self, key: str, expected: bytes | str) -> bool:
        with self._lock:
            if self._live(key) != to_bytes(expected):
                return False
            del self._data[key]
            return True

    def ttl(self, key: str) -> float | None:
        """Remaining lifetime of key in seconds (test utility).

        Returns None when the key is absent or has no expiry.
        """
        with self._lock:
            if self._live(key) is None:
                return None
            expires_at = self._data[key][1]
            return None if expires_at is None else expires_at - time.monotonic()

    def clear(self) -> None:
        """Remove all entries (test utility)."""
        with self._lock:
            self._data.clear()
