"""Configuration section models."""

from warden.config.models.guard import GuardConfig, ResponseBodyConfig
from warden.config.models.observability import ObservabilityConfig
from warden.config.models.storage import RedisConfig

__all__ = [
    "GuardConfig",
    "ObservabilityConfig",
    "RedisConfig",
    "ResponseBodyConfig",
]
