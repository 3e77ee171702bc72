"""Response cache for completed, cacheable outcomes.

Key format: {prefix}:response:{fingerprint}
Value format: msgpack array [status, headers, body]; bodies keep their
bytes/str distinction.
"""

from collections.abc import Mapping

import msgpack
from msgpack.exceptions import UnpackException

from warden.backends.base import KeyValueBackend
from warden.exceptions import BackendError
from warden.models import Body, Outcome
from warden.observability.logging import get_logger

logger = get_logger(__name__)


def serialize(status: int, headers: Mapping[str, str], body: Body) -> bytes:
    return msgpack.packb([status, dict(headers), body], use_bin_type=True)


def deserialize(raw: bytes) -> Outcome:
    """Decode a stored entry.

    Raises:
        ValueError: If the payload is not a [status, headers, body] record
    """
    try:
        record = msgpack.unpackb(raw, raw=False)
    except UnpackException as e:
        raise ValueError(f"Undecodable cache entry: {e}") from e

    if not isinstance(record, list) or len(record) != 3:
        raise ValueError("Cache entry is not a [status, headers, body] record")
    status, headers, body = record
    if not isinstance(status, int) or not isinstance(headers, dict) or not isinstance(body, (bytes, str)):
        raise ValueError("Cache entry has unexpected field types")
    return Outcome(status, headers, body)


class ResponseCache:
    """Stores and retrieves completed outcomes by fingerprint.

    Reads fail open: an unreachable store or a corrupted entry is reported
    as a miss. Writes that cannot reach the store are skipped.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        retention_seconds: int = 86400,
        key_prefix: str = "idempotency",
    ) -> None:
        """Initialize the cache.

        Args:
            backend: Shared key-value store
            retention_seconds: TTL applied to every stored outcome
            key_prefix: Prefix for cached response keys
        """
        self._backend = backend
        self._retention_seconds = retention_seconds
        self._key_prefix = key_prefix

    def response_key(self, fingerprint: str) -> str:
        return f"{self._key_prefix}:response:{fingerprint}"

    def get(self, fingerprint: str) -> Outcome | None:
        """Get the cached outcome for a fingerprint.

        Returns:
            The stored outcome, or None if absent or unreadable
        """
        try:
            raw = self._backend.get(self.response_key(fingerprint))
        except BackendError as e:
            logger.error("response_cache_read_failed", fingerprint=fingerprint, error=e.message)
            return None

        if raw is None:
            return None

        try:
            return deserialize(raw)
        except ValueError as e:
            logger.warning("response_cache_corrupted_entry", fingerprint=fingerprint, error=str(e))
            return None

    def set(self, fingerprint: str, status: int, headers: Mapping[str, str], body: Body) -> bool:
        """Store an outcome.

        Returns:
            True if written, False if the store was unreachable or rejected it
        """
        try:
            self._backend.set(
                self.response_key(fingerprint),
                serialize(status, headers, body),
                ttl_seconds=self._retention_seconds,
            )
        except BackendError as e:
            logger.error("response_cache_write_failed", fingerprint=fingerprint, error=e.message)
            return False

        logger.debug(
            "response_cached",
            fingerprint=fingerprint,
            status=status,
            ttl=self._retention_seconds,
        )
        return True
