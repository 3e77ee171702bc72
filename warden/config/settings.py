"""Root settings model for warden configuration."""

from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from warden.config.loader import deep_merge
from warden.config.models.guard import GuardConfig
from warden.config.models.observability import ObservabilityConfig
from warden.config.models.storage import RedisConfig


class WardenSettings(BaseSettings):
    """Root configuration object containing all nested configuration sections.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{WARDEN_ENV}.toml (environment overrides)
    4. WARDEN_* environment variables (runtime overrides)

    TOML values only apply through from_toml(); a bare WardenSettings()
    sees defaults and the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="WARDEN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="warden", description="Application name for logging")

    guard: GuardConfig = Field(
        default_factory=GuardConfig,
        description="Idempotency protocol configuration",
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig,
        description="Shared store connection configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging and metrics configuration",
    )

    @classmethod
    def from_toml(cls, toml_config: dict[str, Any], **overrides: Any) -> "WardenSettings":
        """Build settings from merged TOML values.

        Environment variables are layered over the TOML values, and keyword
        overrides over both.

        Args:
            toml_config: Merged contents of the TOML files
            **overrides: Field values that take precedence over everything

        Returns:
            A new WardenSettings instance
        """
        env_values = EnvSettingsSource(cls)()
        return cls(**deep_merge(deep_merge(toml_config, env_values), overrides))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],  # noqa: ARG003
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read constructor arguments first, then WARDEN_* variables."""
        return (init_settings, env_settings)
