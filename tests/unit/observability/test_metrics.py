"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from warden.observability.metrics import (
    CACHE_DURATION,
    CACHE_HITS,
    CACHE_MISSES,
    LOCK_CONFLICTS,
)


class TestCounters:
    """Tests for the event counters."""

    def test_counters_registered_under_total_names(self) -> None:
        for counter, name in [
            (CACHE_HITS, "warden_idempotency_cache_hit_total"),
            (CACHE_MISSES, "warden_idempotency_cache_miss_total"),
            (LOCK_CONFLICTS, "warden_idempotency_lock_conflict_total"),
        ]:
            counter.labels(action="metrics-test", namespace="registry").inc()
            assert REGISTRY.get_sample_value(name, {"action": "metrics-test", "namespace": "registry"}) >= 1

    def test_counter_increment(self) -> None:
        labels = {"action": "metrics-increment", "namespace": "orders"}
        before = REGISTRY.get_sample_value("warden_idempotency_cache_miss_total", labels) or 0.0

        CACHE_MISSES.labels(**labels).inc()

        assert REGISTRY.get_sample_value("warden_idempotency_cache_miss_total", labels) == before + 1


class TestCacheDuration:
    """Tests for CACHE_DURATION histogram."""

    def test_histogram_observe(self) -> None:
        labels = {
            "action": "metrics-histogram",
            "namespace": "orders",
            "metric": "idempotency_cache_hit_count",
        }
        CACHE_DURATION.labels(**labels).observe(0.004)

        assert REGISTRY.get_sample_value("warden_idempotency_cache_duration_seconds_count", labels) == 1
        assert REGISTRY.get_sample_value(
            "warden_idempotency_cache_duration_seconds_bucket", {**labels, "le": "0.005"}
        ) == 1
