"""Failed-attempt counter with a sliding TTL window.

Every failure refreshes the window, so a record only expires after a full
``attempt_window_seconds`` of quiet. Increments are a single atomic store
call; there is no read-then-write anywhere in this module.
"""

from bastion.config import LockoutPolicy
from bastion.store.protocol import LockoutStore

ATTEMPTS_KEY_PREFIX = "login_attempts:"


class AttemptCounter:
    """Per-identifier failure counts over a shared store."""

    __slots__ = ("_key_prefix", "_policy", "_store")

    def __init__(self, store: LockoutStore, policy: LockoutPolicy, key_prefix: str = "") -> None:
        self._store = store
        self._policy = policy
        self._key_prefix = key_prefix

    def key(self, identifier: str) -> str:
        return f"{self._key_prefix}{ATTEMPTS_KEY_PREFIX}{identifier}"

    def increment(self, identifier: str) -> int:
        """Record one failure and return the new count (capped at ``max_attempts``)."""
        return self._store.incr(
            self.key(identifier),
            self._policy.attempt_window_seconds,
            ceiling=self._policy.max_attempts,
        )

    def get(self, identifier: str) -> int:
        raw = self._store.get(self.key(identifier))
        return int(raw) if raw is not None else 0

    def clear(self, identifier: str) -> bool:
        """Delete the record. Returns whether one existed."""
        return self._store.delete(self.key(identifier))
