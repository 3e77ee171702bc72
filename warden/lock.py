"""Lease-based mutual exclusion keyed by fingerprint.

A lease is a store entry ``<prefix>:lock:<fingerprint>`` holding a random
ownership token with an expiry. Only the holder of the token can release
it. The expiry bounds how long duplicates are blocked; it does not cancel
a slow handler, so the lease duration should cover the worst-case handler
latency.
"""

import secrets

from warden.backends.base import KeyValueBackend
from warden.exceptions import BackendError, LockConflict
from warden.observability.logging import get_logger

logger = get_logger(__name__)


class LockManager:
    """Acquires and releases leases in the shared store."""

    def __init__(
        self,
        backend: KeyValueBackend,
        default_duration: int = 300,
        key_prefix: str = "idempotency",
    ) -> None:
        """Initialize the lock manager.

        Args:
            backend: Shared key-value store
            default_duration: Lease duration in seconds when none is given
            key_prefix: Prefix for lock keys
        """
        self._backend = backend
        self._default_duration = default_duration
        self._key_prefix = key_prefix

    def lock_key(self, fingerprint: str) -> str:
        return f"{self._key_prefix}:lock:{fingerprint}"

    def acquire(self, fingerprint: str, duration: int | None = None) -> str:
        """Acquire the lease for a fingerprint.

        Args:
            fingerprint: Operation fingerprint
            duration: Lease duration in seconds

        Returns:
            The ownership token of the new lease

        Raises:
            LockConflict: If a live lease already exists
            BackendError: If the store cannot be reached or rejects the command
        """
        token = secrets.token_hex(16)
        duration = duration or self._default_duration

        if not self._backend.set_if_absent(self.lock_key(fingerprint), token, duration):
            logger.info("lock_conflict", fingerprint=fingerprint)
            raise LockConflict("Lock is held by another execution", fingerprint=fingerprint)

        logger.debug("lock_acquired", fingerprint=fingerprint, duration=duration)
        return token

    def release(self, fingerprint: str, token: str) -> None:
        """Release a lease, only if it is still owned by token.

        Raises:
            LockConflict: If the lease expired or now belongs to someone else
            BackendError: If the store cannot be reached or rejects the command
        """
        if not self._backend.compare_and_delete(self.lock_key(fingerprint), token):
            raise LockConflict(
                "Lock expired or was reclaimed before release",
                fingerprint=fingerprint,
            )
        logger.debug("lock_released", fingerprint=fingerprint)

    def release_quietly(self, fingerprint: str, token: str) -> None:
        """Release a lease, logging instead of raising on failure.

        Used once the handler has run, when its outcome must be delivered
        whatever happened to the lease.
        """
        try:
            self.release(fingerprint, token)
        except LockConflict:
            logger.warning("lock_release_conflict", fingerprint=fingerprint, lock_token=token)
        except BackendError as e:
            logger.error("lock_release_backend_failed", fingerprint=fingerprint, error=e.message)
