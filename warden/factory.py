"""Build a ready-to-use guard from settings."""

from redis import Redis

from warden.backends.redis import RedisBackend
from warden.config.models.storage import RedisConfig
from warden.config.settings import WardenSettings
from warden.guard import IdempotencyGuard
from warden.observability.events import EventSink, NoopEventSink, PrometheusEventSink


def create_redis_client(config: RedisConfig) -> Redis:
    """Create a Redis client with its own connection pool.

    Responses are left as bytes so cached bodies round-trip unchanged.
    """
    return Redis.from_url(
        config.url,
        max_connections=config.max_connections,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_connect_timeout,
        decode_responses=False,
    )


def build_event_sink(settings: WardenSettings) -> EventSink:
    if settings.observability.metrics_enabled:
        return PrometheusEventSink(namespace=settings.observability.metrics_namespace)
    return NoopEventSink()


def build_guard(
    settings: WardenSettings,
    redis_client: Redis | None = None,
    event_sink: EventSink | None = None,
) -> IdempotencyGuard:
    """Wire a Redis-backed guard.

    Args:
        settings: Loaded settings
        redis_client: Existing client to share, created from settings if omitted
        event_sink: Event receiver, chosen from settings if omitted

    Returns:
        Configured IdempotencyGuard
    """
    client = redis_client or create_redis_client(settings.redis)
    return IdempotencyGuard(
        RedisBackend(client),
        config=settings.guard,
        event_sink=event_sink or build_event_sink(settings),
    )
