"""Store protocol — the shared, atomic, TTL-capable key-value contract.

Every method is a single round-trip and a single atomic step on the store.
Backends translate driver errors into ``StoreError`` / ``StoreUnavailable``.
"""

from typing import Protocol, runtime_checkable

# ttl() sentinel for a key that exists without an expiry.
NO_EXPIRY = -1


@runtime_checkable
class LockoutStore(Protocol):
    """Key-value store with atomic increment and per-key TTL."""

    def incr(self, key: str, ttl_seconds: int, ceiling: int | None = None) -> int:
        """Create at 1 or increment, refresh the TTL, and return the new value.

        When *ceiling* is given the stored value never exceeds it.
        """
        ...

    def get(self, key: str) -> str | None:
        """Return the value, or ``None`` if absent or expired."""
        ...

    def set(
        self,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
        *,
        only_if_absent: bool = False,
    ) -> bool:
        """Set *key*. Returns ``False`` only when *only_if_absent* blocked the write."""
        ...

    def delete(self, key: str) -> bool:
        """Delete *key*. Returns whether it existed."""
        ...

    def ttl(self, key: str) -> int | None:
        """Seconds until expiry, ``NO_EXPIRY`` if persistent, ``None`` if absent."""
        ...

    def ping(self) -> None:
        """Raise ``StoreUnavailable`` if the store cannot be reached."""
        ...
