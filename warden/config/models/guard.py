"""Idempotency guard configuration models."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from warden.models import DEFAULT_CONCURRENT_ERROR

BackendFailurePolicy = Literal["fail_closed", "fail_open"]

DEFAULT_IDEMPOTENT_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
DEFAULT_CACHEABLE_STATUSES = frozenset(range(200, 300)) | frozenset(range(400, 500))


class ResponseBodyConfig(BaseModel):
    """Bodies of outcomes produced by the guard itself."""

    concurrent_error: str = Field(
        default=DEFAULT_CONCURRENT_ERROR,
        description="Body of the 409 outcome returned on lock conflict",
    )


class GuardConfig(BaseModel):
    """Configuration for the idempotency protocol."""

    default_lock_expiry: int = Field(
        default=300,  # 5 minutes
        gt=0,
        description="Lease duration in seconds when the caller gives none",
    )
    idempotent_methods: frozenset[str] = Field(
        default=DEFAULT_IDEMPOTENT_METHODS,
        description="HTTP methods guarded by the protocol",
    )
    cacheable_statuses: frozenset[int] = Field(
        default=DEFAULT_CACHEABLE_STATUSES,
        description="Status codes whose outcomes are cached",
    )
    response_retention_seconds: int = Field(
        default=86400,  # 24 hours
        gt=0,
        description="TTL applied to every cached outcome",
    )
    backend_failure_policy: BackendFailurePolicy = Field(
        default="fail_closed",
        description="What to do when the store is unreachable during lock acquisition",
    )
    key_prefix: str = Field(
        default="idempotency",
        description="Prefix for lock and cached response keys",
    )
    response_body: ResponseBodyConfig = Field(default_factory=ResponseBodyConfig)

    @field_validator("idempotent_methods", mode="before")
    @classmethod
    def uppercase_methods(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(method).upper() for method in value)
        return value
