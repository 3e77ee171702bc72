"""Prometheus metrics for the idempotency guard."""

from prometheus_client import Counter, Histogram

CACHE_HITS = Counter(
    "warden_idempotency_cache_hit_total",
    "Requests answered from a cached outcome",
    labelnames=["action", "namespace"],
)

CACHE_MISSES = Counter(
    "warden_idempotency_cache_miss_total",
    "Requests with no cached outcome",
    labelnames=["action", "namespace"],
)

LOCK_CONFLICTS = Counter(
    "warden_idempotency_lock_conflict_total",
    "Requests rejected because a duplicate was in flight",
    labelnames=["action", "namespace"],
)

CACHE_DURATION = Histogram(
    "warden_idempotency_cache_duration_seconds",
    "Time from protocol start to the recorded event",
    labelnames=["action", "namespace", "metric"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
