"""Logging and metrics configuration."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ObservabilityConfig(BaseModel):
    """Logging and metrics configuration."""

    log_level: LogLevel = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="JSON for production, console for development",
    )
    redact_sensitive: bool = Field(
        default=True,
        description="Mask idempotency keys and lock tokens in logs",
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Report guard events to Prometheus",
    )
    metrics_namespace: str | None = Field(
        default=None,
        description="Value of the namespace label on guard metrics",
    )
