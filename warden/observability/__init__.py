"""Observability: structured logging, event sinks, metrics.

Provides standardized observability primitives using structlog for logging
and Prometheus for metrics.
"""

from warden.observability.events import (
    EventSink,
    IdempotencyEvent,
    NoopEventSink,
    PrometheusEventSink,
    RecordingEventSink,
)
from warden.observability.logging import get_logger, setup_logging

__all__ = [
    "EventSink",
    "IdempotencyEvent",
    "NoopEventSink",
    "PrometheusEventSink",
    "RecordingEventSink",
    "get_logger",
    "setup_logging",
]
