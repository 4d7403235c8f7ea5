"""Lock markers with their own TTL.

A lock is a single key whose value is the lock time (epoch seconds).
Its presence is the lock; Redis (or the memory store) removes it when the
TTL runs out. A duration of ``0`` stores it without expiry.
"""

import time

from bastion.errors import ValidationError
from bastion.store.protocol import NO_EXPIRY, LockoutStore

LOCK_KEY_PREFIX = "account_lock:"
INDEFINITE = 0


class LockState:
    """Per-identifier lock markers over a shared store."""

    __slots__ = ("_key_prefix", "_store")

    def __init__(self, store: LockoutStore, key_prefix: str = "") -> None:
        self._store = store
        self._key_prefix = key_prefix

    def key(self, identifier: str) -> str:
        return f"{self._key_prefix}{LOCK_KEY_PREFIX}{identifier}"

    def is_locked(self, identifier: str) -> bool:
        return self._store.ttl(self.key(identifier)) is not None

    def lock(
        self, identifier: str, duration_seconds: int, *, only_if_unlocked: bool = False
    ) -> bool:
        """Set the lock marker; a set, never an increment.

        With *only_if_unlocked* an existing lock is left untouched (its TTL is
        neither extended nor shortened) and ``False`` is returned. Returns
        ``True`` when this call wrote the marker.
        """
        if duration_seconds < 0:
            raise ValidationError(f"duration_seconds must be >= 0, got {duration_seconds}")
        return self._store.set(
            self.key(identifier),
            f"{time.time():.3f}",
            duration_seconds or None,
            only_if_absent=only_if_unlocked,
        )

    def unlock(self, identifier: str) -> bool:
        """Remove the lock marker. Returns whether one existed."""
        return self._store.delete(self.key(identifier))

    def remaining_seconds(self, identifier: str) -> int:
        """Seconds until the lock expires; 0 when unlocked or locked indefinitely."""
        remaining = self._store.ttl(self.key(identifier))
        if remaining is None or remaining == NO_EXPIRY:
            return 0
        return max(0, remaining)

    def is_indefinite(self, identifier: str) -> bool:
        return self._store.ttl(self.key(identifier)) == NO_EXPIRY

    def locked_at(self, identifier: str) -> float | None:
        raw = self._store.get(self.key(identifier))
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            return None
