"""Abstract key-value backend shared by the lock manager and response cache."""

from abc import ABC, abstractmethod


class KeyValueBackend(ABC):
    """Narrow capability over a shared key-value store.

    Values are bytes; ``str`` arguments are stored UTF-8 encoded.
    Implementations raise BackendUnavailableError when the store cannot
    be reached and BackendError when it rejects a command.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the value stored at key, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: bytes | str, ttl_seconds: int | None = None) -> None:
        """Store value at key, overwriting it.

        Args:
            key: Store key
            value: Value to store
            ttl_seconds: Expiry in seconds, or None to keep forever
        """
        pass

    @abstractmethod
    def set_if_absent(self, key: str, value: bytes | str, ttl_seconds: int) -> bool:
        """Atomically store value only if key does not exist.

        Returns:
            True if the key was created, False if it already existed
        """
        pass

    @abstractmethod
    def compare_and_delete(self, key: str, expected: bytes | str) -> bool:
        """Atomically delete key only if its value equals expected.

        Returns:
            True if the key was deleted, False if it was absent or held
            a different value
        """
        pass


def to_bytes(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value
