"""Process-local store.

Same contract as the Redis backend, guarded by one ``threading.Lock``.
Suitable for tests and single-process deployments only: state is not
shared between server processes.
"""

import math
import threading
import time
from collections.abc import Callable

from bastion.store.protocol import NO_EXPIRY


class MemoryStore:
    """Dict-backed ``LockoutStore`` with lazy expiry."""

    __slots__ = ("_clock", "_data", "_lock")

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        # key -> (value, expires_at or None)
        self._data: dict[str, tuple[str, float | None]] = {}

    def _live(self, key: str, now: float) -> tuple[str, float | None] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        _value, expires_at = entry
        if expires_at is not None and expires_at <= now:
            del self._data[key]
            return None
        return entry

    def incr(self, key: str, ttl_seconds: int, ceiling: int | None = None) -> int:
        now = self._clock()
        with self._lock:
            entry = self._live(key, now)
            count = int(entry[0]) + 1 if entry else 1
            if ceiling is not None:
                count = min(count, ceiling)
            self._data[key] = (str(count), now + ttl_seconds)
            return count

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live(key, self._clock())
            return entry[0] if entry else None

    def set(
        self,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
        *,
        only_if_absent: bool = False,
    ) -> bool:
        now = self._clock()
        with self._lock:
            if only_if_absent and self._live(key, now) is not None:
                return False
            expires_at = now + ttl_seconds if ttl_seconds else None
            self._data[key] = (value, expires_at)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            if self._live(key, self._clock()) is None:
                return False
            del self._data[key]
            return True

    def ttl(self, key: str) -> int | None:
        now = self._clock()
        with self._lock:
            entry = self._live(key, now)
            if entry is None:
                return None
            expires_at = entry[1]
            if expires_at is None:
                return NO_EXPIRY
            return math.ceil(expires_at - now)

    def ping(self) -> None:
        return None
