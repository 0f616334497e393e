"""Pytest fixtures for slot machine tests."""
import itertools
from collections.abc import Callable, Iterable
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from slot_machine.logic.symbols import Symbol
from slot_machine.main import app
from slot_machine.redis_service import RedisService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long seeded simulations)"
    )


class MockRedis:
    """In-memory stand-in for the async Redis client."""

    def __init__(self):
        self._store: dict[str, str] = {}
        self._ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(
        self, key: str, value: str, nx: bool = False, ex: int | None = None
    ) -> bool | None:
        if nx and key in self._store:
            return None
        self._store[key] = value
        self._ttls[key] = ex
        return True

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._store[key] = value
        self._ttls[key] = ttl
        return True

    async def delete(self, key: str) -> int:
        if key in self._store:
            del self._store[key]
            self._ttls.pop(key, None)
            return 1
        return 0

    async def eval(self, script: str, numkeys: int, *args) -> int:
        """Compare-and-delete, matching RedisService.RELEASE_LOCK_SCRIPT."""
        key = args[0]
        expected_value = args[1]
        if self._store.get(key) == expected_value:
            del self._store[key]
            return 1
        return 0

    async def close(self) -> None:
        pass

    def ttl_of(self, key: str) -> int | None:
        return self._ttls.get(key)

    def clear(self) -> None:
        self._store.clear()
        self._ttls.clear()


class ScriptedSymbolSource:
    """Symbol source that replays a fixed sequence, cycling when exhausted."""

    def __init__(self, symbols: Iterable[Symbol]):
        self.symbols = list(symbols)
        self._cycle = itertools.cycle(self.symbols)
        self.draws = 0

    def draw(self) -> Symbol:
        self.draws += 1
        return next(self._cycle)


class RecordingTelemetrySink:
    """Telemetry sink that keeps every event in memory."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]


@pytest.fixture
def make_source() -> Callable[..., ScriptedSymbolSource]:
    """Factory for scripted symbol sources: make_source(Symbol.SEVEN, ...)."""

    def _make(*symbols: Symbol) -> ScriptedSymbolSource:
        return ScriptedSymbolSource(symbols)

    return _make


@pytest.fixture
def blank_source() -> ScriptedSymbolSource:
    """Source that only ever draws Blank (every spin loses)."""
    return ScriptedSymbolSource([Symbol.BLANK])


@pytest.fixture
def mock_redis() -> MockRedis:
    """Create a fresh mock Redis for each test."""
    return MockRedis()


@pytest.fixture
def redis_service_with_mock(mock_redis: MockRedis) -> Generator[RedisService, None, None]:
    """Create RedisService with mock client."""
    service = RedisService()
    service._client = mock_redis
    yield service
    mock_redis.clear()


@pytest.fixture
def recording_telemetry() -> Generator[RecordingTelemetrySink, None, None]:
    """Route the global telemetry service into a recording sink."""
    from slot_machine.telemetry import LoggingTelemetrySink, telemetry_service

    sink = RecordingTelemetrySink()
    telemetry_service.set_sink(sink)
    yield sink
    telemetry_service.set_sink(LoggingTelemetrySink())


@pytest.fixture
def client_with_mock_redis(
    mock_redis: MockRedis,
    blank_source: ScriptedSymbolSource,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[TestClient, None, None]:
    """TestClient with mocked Redis and reels that always draw Blank."""
    from slot_machine import main
    from slot_machine.redis_service import redis_service

    monkeypatch.setattr(main, "symbol_source", blank_source)

    original_client = redis_service._client
    redis_service._client = mock_redis

    with TestClient(app) as client:
        yield client

    redis_service._client = original_client
    mock_redis.clear()


@pytest.fixture
def test_client() -> TestClient:
    """Create basic TestClient (for tests that don't need Redis)."""
    return TestClient(app)
