"""
Global test configuration: environment isolation, markers and fakes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import suppress
import logging
import os

import pytest

from webhook_chat.core.types import ChatRequest, TransportOk, TransportResult


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Tests should only see environment that they explicitly set. Mark a test
    with @pytest.mark.allow_dotenv to permit .env loading.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "webhook_chat.config.env_loader.load_dotenv",
            lambda *_args, **_kwargs: False,
        )


@pytest.fixture(autouse=True)
def isolate_webhook_chat_env(request, monkeypatch):
    """Ensure a clean WEBHOOK_CHAT_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the environment.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("WEBHOOK_CHAT_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles switching telemetry on
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path):
    """Point the home config path at an isolated, non-existent file."""
    if request.node.get_closest_marker("allow_real_home_config"):
        return
    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("WEBHOOK_CHAT_CONFIG_HOME", str(fake_home_dir / "webhook_chat.toml"))


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked HTTP",
        "allow_dotenv: Permit python-dotenv to load .env files",
        "allow_env_pollution: Keep WEBHOOK_CHAT_* variables from the outer environment",
        "allow_real_home_config: Read the developer's real home config file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Transport Fakes ---


class RecordingTransport:
    """Answers every request with queued results and records what it saw.

    Queue entries may be a `TransportResult`, an exception instance (raised),
    or a plain string (wrapped in `TransportOk`).
    """

    def __init__(self, *results: TransportResult | BaseException | str) -> None:
        self.results = list(results)
        self.requests: list[ChatRequest] = []

    async def __call__(self, request: ChatRequest) -> TransportResult:
        self.requests.append(request)
        return self._next_result()

    def _next_result(self) -> TransportResult:
        result = self.results.pop(0) if self.results else TransportOk("")
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, str):
            return TransportOk(result)
        return result


class GatedTransport(RecordingTransport):
    """A `RecordingTransport` that holds every call until `release()`."""

    def __init__(self, *results: TransportResult | BaseException | str) -> None:
        super().__init__(*results)
        self.gate = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def __call__(self, request: ChatRequest) -> TransportResult:
        self.requests.append(request)
        await self.gate.wait()
        return self._next_result()


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    """Factory for `RecordingTransport` instances."""
    return RecordingTransport


@pytest.fixture
def gated_transport() -> Callable[..., GatedTransport]:
    """Factory for `GatedTransport` instances (create inside a running loop)."""
    return GatedTransport
