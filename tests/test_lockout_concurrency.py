"""Concurrency properties: no lost increments, exactly one lock transition."""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

from bastion.audit import SecurityEvent
from bastion.config import LockoutPolicy
from bastion.engine import LockoutEngine
from bastion.store.memory import MemoryStore


def _fire_failures(engine: LockoutEngine, identifier: str, count: int) -> list[int]:
    barrier = Barrier(count)

    def attempt() -> int:
        barrier.wait()
        return engine.record_login_failure(identifier)

    with ThreadPoolExecutor(max_workers=count) as pool:
        futures = [pool.submit(attempt) for _ in range(count)]
        return [future.result() for future in futures]


def test_max_concurrent_failures_lock_once(events: list[SecurityEvent]) -> None:
    engine = LockoutEngine(MemoryStore(), LockoutPolicy(max_attempts=10))

    results = _fire_failures(engine, "a@b.com", 10)

    assert sorted(results) == list(range(1, 11))
    assert engine.get_login_attempts("a@b.com") == 10
    assert engine.is_account_locked("a@b.com") is True
    assert [event.name for event in events].count("lockout.locked") == 1


def test_excess_concurrent_failures_stay_bounded(events: list[SecurityEvent]) -> None:
    engine = LockoutEngine(MemoryStore(), LockoutPolicy(max_attempts=5))

    results = _fire_failures(engine, "a@b.com", 20)

    assert max(results) == 5
    assert engine.get_login_attempts("a@b.com") == 5
    assert engine.get_remaining_attempts("a@b.com") == 0
    assert engine.get_account_lock_remaining_time("a@b.com") == 1800
    assert [event.name for event in events].count("lockout.locked") == 1


def test_distinct_identifiers_do_not_interfere() -> None:
    engine = LockoutEngine(MemoryStore(), LockoutPolicy(max_attempts=50))
    identifiers = [f"user{i}@b.com" for i in range(8)]

    def hammer(identifier: str) -> None:
        for _ in range(20):
            engine.record_login_failure(identifier)

    with ThreadPoolExecutor(max_workers=len(identifiers)) as pool:
        list(pool.map(hammer, identifiers))

    assert all(engine.get_login_attempts(i) == 20 for i in identifiers)
    assert not any(engine.is_account_locked(i) for i in identifiers)
