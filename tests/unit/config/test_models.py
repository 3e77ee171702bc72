"""Unit tests for configuration section models."""

import pytest
from pydantic import ValidationError

from warden.config.models import GuardConfig, ObservabilityConfig, RedisConfig


class TestGuardConfig:
    """Tests for GuardConfig."""

    def test_methods_are_uppercased(self) -> None:
        config = GuardConfig(idempotent_methods=["post", "Put"])
        assert config.idempotent_methods == frozenset({"POST", "PUT"})

    def test_single_method_string(self) -> None:
        assert GuardConfig(idempotent_methods="post").idempotent_methods == frozenset({"POST"})

    def test_statuses_from_list(self) -> None:
        assert GuardConfig(cacheable_statuses=[200, 201]).cacheable_statuses == frozenset({200, 201})

    @pytest.mark.parametrize("field", ["default_lock_expiry", "response_retention_seconds"])
    def test_durations_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            GuardConfig(**{field: 0})

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GuardConfig(backend_failure_policy="retry")


class TestRedisConfig:
    def test_max_connections_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            RedisConfig(max_connections=0)


class TestObservabilityConfig:
    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(ValidationError):
            ObservabilityConfig(log_format="xml")
