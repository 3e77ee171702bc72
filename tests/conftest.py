"""Shared test fixtures for the warden test suite."""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from warden.backends import InMemoryBackend
from warden.config.models import GuardConfig
from warden.guard import IdempotencyGuard
from warden.models import SimpleRequest
from warden.observability.events import RecordingEventSink


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "[guard]\\ndefault_lock_expiry = 10",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"WARDEN_GUARD__DEFAULT_LOCK_EXPIRY": "30"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture
def backend() -> InMemoryBackend:
    """Fresh in-memory store."""
    return InMemoryBackend()


@pytest.fixture
def guard_config() -> GuardConfig:
    return GuardConfig(default_lock_expiry=30)


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def guard(
    backend: InMemoryBackend,
    guard_config: GuardConfig,
    event_sink: RecordingEventSink,
) -> IdempotencyGuard:
    """Guard over the in-memory store that records its events."""
    return IdempotencyGuard(backend, config=guard_config, event_sink=event_sink)


@pytest.fixture
def make_request() -> Callable[..., SimpleRequest]:
    """Factory for framework-free requests.

    Usage:
        request = make_request("POST", idempotency_key="abc")
    """

    def _make_request(
        method: str = "POST",
        path: str = "/int/orders/a960e817-3b3c-487c-8db4-7a1d065f52b7",
        idempotency_key: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> SimpleRequest:
        all_headers = dict(headers or {})
        if idempotency_key is not None:
            all_headers["Idempotency-Key"] = idempotency_key
        return SimpleRequest(method=method, path=path, headers=all_headers)

    return _make_request
