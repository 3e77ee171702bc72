"""warden: run mutating HTTP operations exactly once.

The guard fingerprints each guarded request, replays cached outcomes,
rejects in-flight duplicates with 409 and runs first executions under a
lease held in a shared key-value store.
"""

from warden.backends import InMemoryBackend, KeyValueBackend, RedisBackend
from warden.cache import ResponseCache
from warden.config import GuardConfig, WardenSettings, load_settings
from warden.exceptions import (
    BackendError,
    BackendUnavailableError,
    LockConflict,
    WardenError,
)
from warden.fingerprint import IDEMPOTENCY_HEADER, fingerprint
from warden.guard import IdempotencyGuard
from warden.lock import LockManager
from warden.models import Outcome, RequestDescriptor, SimpleRequest

__version__ = "0.1.0"

__all__ = [
    "BackendError",
    "BackendUnavailableError",
    "GuardConfig",
    "IDEMPOTENCY_HEADER",
    "IdempotencyGuard",
    "InMemoryBackend",
    "KeyValueBackend",
    "LockConflict",
    "LockManager",
    "Outcome",
    "RedisBackend",
    "RequestDescriptor",
    "ResponseCache",
    "SimpleRequest",
    "WardenError",
    "WardenSettings",
    "fingerprint",
    "load_settings",
]
