"""Event sinks notified at guard state transitions.

The guard calls ``record(event, metadata)`` on cache hit, cache miss and
lock conflict without knowing what consumes it.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from prometheus_client import Counter

from warden.observability.metrics import (
    CACHE_DURATION,
    CACHE_HITS,
    CACHE_MISSES,
    LOCK_CONFLICTS,
)


class IdempotencyEvent(str, Enum):
    """Transition points reported by the guard."""

    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    LOCK_CONFLICT = "lock_conflict"


@runtime_checkable
class EventSink(Protocol):
    """Consumer of guard events."""

    def record(self, event: IdempotencyEvent, metadata: Mapping[str, Any]) -> None: ...


class NoopEventSink:
    """Discards every event."""

    def record(self, event: IdempotencyEvent, metadata: Mapping[str, Any]) -> None:
        return None


class RecordingEventSink:
    """Keeps events in memory for testing."""

    def __init__(self) -> None:
        self.events: list[tuple[IdempotencyEvent, dict[str, Any]]] = []

    def record(self, event: IdempotencyEvent, metadata: Mapping[str, Any]) -> None:
        self.events.append((event, dict(metadata)))

    def names(self) -> list[IdempotencyEvent]:
        """Event names in the order they were recorded."""
        return [event for event, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


class PrometheusEventSink:
    """Translates guard events into Prometheus counters and a latency histogram.

    Each event increments its counter labelled by action and namespace, and
    observes the event's duration in the shared histogram, labelled with the
    counter it belongs to.
    """

    EVENT_COUNTERS: dict[IdempotencyEvent, tuple[str, Counter]] = {
        IdempotencyEvent.CACHE_HIT: ("idempotency_cache_hit_count", CACHE_HITS),
        IdempotencyEvent.CACHE_MISS: ("idempotency_cache_miss_count", CACHE_MISSES),
        IdempotencyEvent.LOCK_CONFLICT: ("idempotency_lock_conflict_count", LOCK_CONFLICTS),
    }

    def __init__(self, namespace: str | None = None) -> None:
        self._namespace = namespace or ""

    def record(self, event: IdempotencyEvent, metadata: Mapping[str, Any]) -> None:
        metric_name, counter = self.EVENT_COUNTERS[event]
        action = metadata.get("action") or f"{metadata.get('method')}:{metadata.get('path')}"

        counter.labels(action=action, namespace=self._namespace).inc()

        duration = metadata.get("duration")
        if duration is not None:
            CACHE_DURATION.labels(
                action=action,
                namespace=self._namespace,
                metric=metric_name,
            ).observe(duration)
