"""Shared store connection configuration."""

from pydantic import BaseModel, Field


class RedisConfig(BaseModel):
    """Redis connection pool configuration."""

    url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    max_connections: int = Field(
        default=50,
        gt=0,
        description="Maximum connections held by the pool",
    )
    socket_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Seconds to wait for a command reply",
    )
    socket_connect_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Seconds to wait for a connection",
    )
