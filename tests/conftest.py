"""Shared fixtures for lockout tests."""

from collections.abc import Iterator

import pytest

from bastion.audit import SecurityEvent, set_security_event_sink
from bastion.config import LockoutPolicy
from bastion.engine import LockoutEngine
from bastion.errors import StoreUnavailable
from bastion.store.memory import MemoryStore


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UnavailableStore:
    """Store whose every call fails as if Redis were down."""

    def _fail(self, *args: object, **kwargs: object) -> None:
        raise StoreUnavailable("connection refused")

    incr = get = set = delete = ttl = ping = _fail


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryStore:
    return MemoryStore(clock=clock)


@pytest.fixture
def policy() -> LockoutPolicy:
    return LockoutPolicy(max_attempts=5, attempt_window_seconds=3600, lock_duration_seconds=1800)


@pytest.fixture
def engine(store: MemoryStore, policy: LockoutPolicy) -> LockoutEngine:
    return LockoutEngine(store, policy)


@pytest.fixture
def events() -> Iterator[list[SecurityEvent]]:
    captured: list[SecurityEvent] = []
    set_security_event_sink(captured.append)
    try:
        yield captured
    finally:
        set_security_event_sink(None)


@pytest.fixture
def failing_sink() -> Iterator[list[str]]:
    """Sink that records event names and then raises, like a down alert pipeline."""
    attempted: list[str] = []

    def sink(event: SecurityEvent) -> None:
        attempted.append(event.name)
        raise RuntimeError("alerting pipeline down")

    set_security_event_sink(sink)
    try:
        yield attempted
    finally:
        set_security_event_sink(None)
