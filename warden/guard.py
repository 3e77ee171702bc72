"""Idempotency guard: runs a handler at most once per fingerprint.

For a guarded request the guard either replays a cached outcome, rejects a
duplicate that is still in flight with a 409 outcome, or runs the handler
under a lease and caches its outcome when the status is cacheable.
"""

import time
from collections.abc import Callable, Sequence
from typing import Any

from warden.backends.base import KeyValueBackend
from warden.cache import ResponseCache
from warden.config.models.guard import GuardConfig
from warden.exceptions import BackendError, LockConflict
from warden.fingerprint import IDEMPOTENCY_HEADER, fingerprint, resolve_token
from warden.lock import LockManager
from warden.models import Body, Outcome, RequestDescriptor
from warden.observability.events import EventSink, IdempotencyEvent, NoopEventSink
from warden.observability.logging import get_logger

logger = get_logger(__name__)

CONFLICT_STATUS = 409

Handler = Callable[[], Outcome | tuple[int, dict[str, str], Body]]


class IdempotencyGuard:
    """Sequences fingerprinting, caching and locking around a handler.

    The guard is synchronous and stateless between calls; all coordination
    between processes goes through the shared backend.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        config: GuardConfig | None = None,
        event_sink: EventSink | None = None,
        cache: ResponseCache | None = None,
        locks: LockManager | None = None,
    ) -> None:
        """Initialize the guard.

        Args:
            backend: Shared key-value store
            config: Protocol configuration, defaults to GuardConfig()
            event_sink: Receiver of cache hit/miss and conflict events
            cache: Response cache, built from backend and config if omitted
            locks: Lock manager, built from backend and config if omitted
        """
        self._config = config or GuardConfig()
        self._event_sink = event_sink or NoopEventSink()
        self._cache = cache or ResponseCache(
            backend,
            retention_seconds=self._config.response_retention_seconds,
            key_prefix=self._config.key_prefix,
        )
        self._locks = locks or LockManager(
            backend,
            default_duration=self._config.default_lock_expiry,
            key_prefix=self._config.key_prefix,
        )

    @property
    def config(self) -> GuardConfig:
        return self._config

    def is_guarded(self, method: str) -> bool:
        return method.upper() in self._config.idempotent_methods

    def is_cacheable(self, status: int) -> bool:
        return status in self._config.cacheable_statuses

    def conflict_outcome(self) -> Outcome:
        return Outcome(CONFLICT_STATUS, {}, self._config.response_body.concurrent_error)

    def use_cache(
        self,
        request: RequestDescriptor,
        handler: Handler,
        request_identifiers: Sequence[str] = (),
        lock_duration: int | None = None,
        action: str | None = None,
    ) -> Outcome:
        """Run handler at most once for this logical request.

        Args:
            request: Method, path and headers of the inbound operation
            handler: Zero-argument callable returning (status, headers, body)
            request_identifiers: Discriminators in a stable order, e.g.
                tenant id before resource id
            lock_duration: Lease duration in seconds, defaults to
                config.default_lock_expiry
            action: Name reported with events, defaults to "METHOD:path"

        Returns:
            The outcome to send back to the client

        Raises:
            Whatever handler raises, after the lease has been released
        """
        if not self.is_guarded(request.method):
            return Outcome.coerce(handler())

        started = time.perf_counter()
        method = request.method.upper()
        token = resolve_token(request)
        fp = fingerprint(token, request.path, method, request_identifiers)

        def emit(event: IdempotencyEvent, **extra: Any) -> None:
            self._emit(event, request, method, action, started, **extra)

        cached = self._cache.get(fp)
        if cached is not None:
            logger.debug("idempotency_cache_hit", fingerprint=fp, status=cached.status)
            emit(IdempotencyEvent.CACHE_HIT)
            return cached.with_header(IDEMPOTENCY_HEADER, token)

        logger.debug("idempotency_cache_miss", fingerprint=fp)
        emit(IdempotencyEvent.CACHE_MISS)

        try:
            lease = self._locks.acquire(fp, lock_duration or self._config.default_lock_expiry)
        except LockConflict:
            emit(IdempotencyEvent.LOCK_CONFLICT, reason="in_flight")
            return self.conflict_outcome()
        except BackendError as e:
            return self._on_acquire_unavailable(fp, token, handler, e, emit)

        try:
            outcome = Outcome.coerce(handler())
            return self._finish(fp, token, outcome)
        finally:
            self._locks.release_quietly(fp, lease)

    def _finish(self, fp: str, token: str, outcome: Outcome) -> Outcome:
        if not self.is_cacheable(outcome.status):
            logger.debug("idempotency_response_not_cacheable", fingerprint=fp, status=outcome.status)
            return outcome

        self._cache.set(fp, outcome.status, outcome.headers, outcome.body)
        return outcome.with_header(IDEMPOTENCY_HEADER, token)

    def _on_acquire_unavailable(
        self,
        fp: str,
        token: str,
        handler: Handler,
        error: BackendError,
        emit: Callable[..., None],
    ) -> Outcome:
        logger.error(
            "lock_acquire_backend_failed",
            fingerprint=fp,
            policy=self._config.backend_failure_policy,
            error=error.message,
        )
        if self._config.backend_failure_policy == "fail_open":
            logger.warning("idempotency_fail_open_bypass", fingerprint=fp)
            return self._finish(fp, token, Outcome.coerce(handler()))

        emit(IdempotencyEvent.LOCK_CONFLICT, reason="backend_unavailable")
        return self.conflict_outcome()

    def _emit(
        self,
        event: IdempotencyEvent,
        request: RequestDescriptor,
        method: str,
        action: str | None,
        started: float,
        **extra: Any,
    ) -> None:
        metadata = {
            "action": action or f"{method}:{request.path}",
            "method": method,
            "path": request.path,
            "duration": time.perf_counter() - started,
            **extra,
        }
        try:
            self._event_sink.record(event, metadata)
        except Exception:
            logger.exception("idempotency_event_sink_failed", event=event.value)
