"""Redis-backed key-value backend."""

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import NoScriptError, RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from warden.backends.base import KeyValueBackend, to_bytes
from warden.exceptions import BackendError, BackendUnavailableError
from warden.observability.logging import get_logger

logger = get_logger(__name__)

COMPARE_AND_DELETE_SCRIPT = """
local expected = ARGV[1]
local current = redis.call('GET', KEYS[1])

if current == expected then
    redis.call('DEL', KEYS[1])
    return 1
end

return 0
"""
COMPARE_AND_DELETE_SHA = hashlib.sha1(COMPARE_AND_DELETE_SCRIPT.encode("utf-8")).hexdigest()


class RedisBackend(KeyValueBackend):
    """Key-value backend over a synchronous Redis client.

    The client's connection pool is owned by the caller. Atomic
    compare-and-delete runs as a server-side Lua script invoked by SHA;
    the script is loaded on the first NOSCRIPT reply and the call retried.
    """

    def __init__(self, redis: Redis) -> None:
        """Initialize the backend.

        Args:
            redis: Redis client instance (decode_responses must be False)
        """
        self._redis = redis

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise BackendUnavailableError(f"Redis {operation} failed: {e}") from e
        except RedisError as e:
            raise BackendError(f"Redis {operation} rejected: {e}") from e

    def get(self, key: str) -> bytes | None:
        with self._translate_errors("get"):
            return self._redis.get(key)  # type: ignore[return-value]

    def set(self, key: str, value: bytes | str, ttl_seconds: int | None = None) -> None:
        with self._translate_errors("set"):
            self._redis.set(key, to_bytes(value), ex=ttl_seconds)

    def set_if_absent(self, key: str, value: bytes | str, ttl_seconds: int) -> bool:
        with self._translate_errors("set_if_absent"):
            return bool(self._redis.set(key, to_bytes(value), nx=True, ex=ttl_seconds))

    def compare_and_delete(self, key: str, expected: bytes | str) -> bool:
        with self._translate_errors("compare_and_delete"):
            try:
                deleted = self._redis.evalsha(COMPARE_AND_DELETE_SHA, 1, key, to_bytes(expected))
            except NoScriptError:
                # Needed once per server lifetime, or after SCRIPT FLUSH
                logger.info("compare_and_delete_script_loading", sha=COMPARE_AND_DELETE_SHA)
                self._redis.script_load(COMPARE_AND_DELETE_SCRIPT)
                deleted = self._redis.evalsha(COMPARE_AND_DELETE_SHA, 1, key, to_bytes(expected))
        return deleted == 1
