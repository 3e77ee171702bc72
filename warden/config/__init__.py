"""Configuration loading for warden.

Configuration is loaded from TOML files with environment variable overrides,
once at process start, and handed explicitly to the objects that need it.

Usage:
    from warden.config import load_settings

    settings = load_settings()
    guard = build_guard(settings)
"""

from pathlib import Path

from warden.config.loader import load_config
from warden.config.models import GuardConfig, ObservabilityConfig, RedisConfig
from warden.config.settings import WardenSettings


def load_settings(config_dir: Path | None = None) -> WardenSettings:
    """Load and validate settings.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{WARDEN_ENV}.toml (environment overrides)
    4. WARDEN_* environment variables (runtime overrides)

    Args:
        config_dir: Directory holding the TOML files

    Returns:
        A fresh WardenSettings instance
    """
    return WardenSettings.from_toml(load_config(config_dir))


__all__ = [
    "GuardConfig",
    "ObservabilityConfig",
    "RedisConfig",
    "WardenSettings",
    "load_settings",
]
