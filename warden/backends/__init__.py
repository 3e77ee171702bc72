"""Key-value backends for leases and cached outcomes."""

from warden.backends.base import KeyValueBackend
from warden.backends.inmemory import InMemoryBackend
from warden.backends.redis import COMPARE_AND_DELETE_SCRIPT, COMPARE_AND_DELETE_SHA, RedisBackend

__all__ = [
    "COMPARE_AND_DELETE_SCRIPT",
    "COMPARE_AND_DELETE_SHA",
    "InMemoryBackend",
    "KeyValueBackend",
    "RedisBackend",
]
