"""Bastion — account lockout and brute-force protection.

Counts failed logins per identifier and locks the account once a threshold
is crossed. State lives in a shared store (Redis in production) so every
server process sees the same counters and locks.

Basic usage::

    from bastion import LockoutEngine, LockoutPolicy, RedisStore

    engine = LockoutEngine(
        RedisStore.from_url("redis://localhost:6379/0"),
        LockoutPolicy(max_attempts=5, lock_duration_seconds=1800),
    )

    if engine.is_account_locked("a@b.com"):
        ...
    engine.record_login_failure("a@b.com")

Guarded login::

    from bastion import LoginGuard

    outcome = LoginGuard(engine).authenticate(email, lambda: check(password))
"""

from bastion.audit import SecurityEvent, emit_security_event, set_security_event_sink
from bastion.config import FailMode, LockoutPolicy, Settings, load_settings
from bastion.counter import AttemptCounter
from bastion.engine import LockoutEngine, LockoutState, LockoutStatus
from bastion.errors import (
    BastionError,
    ConfigurationError,
    StoreError,
    StoreUnavailable,
    ValidationError,
)
from bastion.guard import LoginGuard, LoginOutcome, LoginResult
from bastion.identifiers import normalize_identifier
from bastion.lock_state import LockState
from bastion.store import LockoutStore, MemoryStore, RedisStore, open_store

__version__ = "0.1.0"
__all__ = [
    "AttemptCounter",
    "BastionError",
    "ConfigurationError",
    "FailMode",
    "LockState",
    "LockoutEngine",
    "LockoutPolicy",
    "LockoutState",
    "LockoutStatus",
    "LockoutStore",
    "LoginGuard",
    "LoginOutcome",
    "LoginResult",
    "MemoryStore",
    "RedisStore",
    "SecurityEvent",
    "Settings",
    "StoreError",
    "StoreUnavailable",
    "ValidationError",
    "emit_security_event",
    "load_settings",
    "normalize_identifier",
    "open_store",
    "set_security_event_sink",
]
