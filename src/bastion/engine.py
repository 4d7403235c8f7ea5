"""Account lockout engine.

Orchestrates the attempt counter and the lock markers into one state
machine per identifier::

    CLEAN --failure--> WARNING --failure (count reaches max)--> LOCKED
    WARNING --success--> CLEAN
    LOCKED --failure--> LOCKED          (counter frozen, lock not extended)
    LOCKED --unlock or expiry--> CLEAN or WARNING (counter left as is)

All state lives in the shared store. There is no in-process locking:
concurrent callers in different processes rely on the store's atomic
increment and ``SET NX``.

Usage::

    engine = LockoutEngine(RedisStore.from_url("redis://localhost:6379/0"))

    if engine.is_account_locked(email):
        ...  # reject without verifying credentials
    elif verify(email, password):
        engine.record_login_success(email)
    else:
        engine.record_login_failure(email)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from bastion.audit import emit_security_event
from bastion.config import FailMode, LockoutPolicy, Settings
from bastion.counter import AttemptCounter
from bastion.errors import StoreUnavailable, ValidationError
from bastion.identifiers import normalize_identifier
from bastion.lock_state import INDEFINITE, LockState
from bastion.store.protocol import LockoutStore

logger = logging.getLogger("bastion.lockout")


class LockoutState(Enum):
    CLEAN = "clean"
    WARNING = "warning"
    LOCKED = "locked"


@dataclass(frozen=True, slots=True)
class LockoutStatus:
    """Point-in-time view of one identifier, for administrative inspection."""

    identifier: str
    state: LockoutState
    attempts: int
    remaining_attempts: int
    locked: bool
    lock_remaining_seconds: int
    indefinite: bool = False
    locked_at: float | None = None


class LockoutEngine:
    """Brute-force protection over a shared atomic TTL store.

    Args:
        store: The shared backing store.
        policy: Thresholds and durations. Defaults to ``LockoutPolicy()``.
        fail_mode: What the authentication path does when the store is down.
            ``FailMode.OPEN`` (default) treats accounts as unlocked and keeps
            logins working with brute-force protection disabled;
            ``FailMode.CLOSED`` treats them as locked.
        key_prefix: Namespace prepended to every store key.
    """

    __slots__ = ("_counter", "_fail_mode", "_lock_state", "_policy")

    def __init__(
        self,
        store: LockoutStore,
        policy: LockoutPolicy | None = None,
        *,
        fail_mode: FailMode = FailMode.OPEN,
        key_prefix: str = "",
    ) -> None:
        self._policy = policy or LockoutPolicy()
        self._fail_mode = fail_mode
        self._counter = AttemptCounter(store, self._policy, key_prefix)
        self._lock_state = LockState(store, key_prefix)

    @classmethod
    def from_settings(cls, settings: Settings, store: LockoutStore) -> LockoutEngine:
        return cls(
            store,
            settings.policy,
            fail_mode=settings.fail_mode,
            key_prefix=settings.key_prefix,
        )

    @property
    def policy(self) -> LockoutPolicy:
        return self._policy

    @property
    def fail_mode(self) -> FailMode:
        return self._fail_mode

    # -- Store outage ------------------------------------------------------

    def _store_unavailable(self, operation: str, identifier: str, exc: StoreUnavailable) -> None:
        if self._fail_mode is FailMode.OPEN:
            logger.error(
                "Lockout store unavailable during %s for %s; failing OPEN, "
                "brute-force protection is disabled until the store recovers: %s",
                operation,
                identifier,
                exc,
            )
        else:
            logger.error(
                "Lockout store unavailable during %s for %s; failing CLOSED: %s",
                operation,
                identifier,
                exc,
            )
        emit_security_event(
            "lockout.store.unavailable",
            identifier=identifier,
            details={"operation": operation, "fail_mode": self._fail_mode.value},
        )

    # -- Authentication path -----------------------------------------------

    def is_account_locked(self, identifier: str) -> bool:
        """Check before verifying credentials; a locked account must not be verified."""
        key = normalize_identifier(identifier)
        try:
            locked = self._lock_state.is_locked(key)
        except StoreUnavailable as exc:
            self._store_unavailable("is_account_locked", key, exc)
            return self._fail_mode is FailMode.CLOSED
        if locked:
            logger.info("Account %s is locked", key)
        return locked

    def record_login_failure(self, identifier: str) -> int:
        """Record a failed verification and return the attempt count.

        A locked account's counter is frozen: the current count is returned
        and neither the count nor the lock TTL changes. The failure that
        brings the count to ``max_attempts`` locks the account.
        """
        key = normalize_identifier(identifier)
        policy = self._policy
        try:
            if self._lock_state.is_locked(key):
                attempts = self._counter.get(key)
                logger.warning(
                    "Account %s is locked; failure not counted (attempts=%d)", key, attempts
                )
                return attempts

            attempts = self._counter.increment(key)
            logger.warning(
                "Login failure for %s: attempts=%d, remaining=%d",
                key,
                attempts,
                max(0, policy.max_attempts - attempts),
            )
            locked_now = False
            if attempts >= policy.max_attempts:
                # SET NX: concurrent failures crossing the threshold produce one lock.
                locked_now = self._lock_state.lock(
                    key, policy.lock_duration_seconds, only_if_unlocked=True
                )
        except StoreUnavailable as exc:
            self._store_unavailable("record_login_failure", key, exc)
            if self._fail_mode is FailMode.CLOSED:
                raise
            return 0

        # Events go out only once the store writes are done.
        emit_security_event(
            "lockout.failure.recorded",
            identifier=key,
            details={"attempts": attempts, "max_attempts": policy.max_attempts},
        )
        if locked_now:
            logger.error(
                "Account %s locked for %d seconds after %d failed attempts",
                key,
                policy.lock_duration_seconds,
                attempts,
            )
            emit_security_event(
                "lockout.locked",
                identifier=key,
                details={
                    "attempts": attempts,
                    "duration_seconds": policy.lock_duration_seconds,
                },
            )
        return attempts

    def record_login_success(self, identifier: str) -> None:
        """Clear the failure history after a successful verification."""
        key = normalize_identifier(identifier)
        try:
            if self._counter.clear(key):
                logger.info("Cleared failed attempts for %s after successful login", key)
        except StoreUnavailable as exc:
            self._store_unavailable("record_login_success", key, exc)
            if self._fail_mode is FailMode.CLOSED:
                raise

    # -- Inspection --------------------------------------------------------

    def get_login_attempts(self, identifier: str) -> int:
        return self._counter.get(normalize_identifier(identifier))

    def get_remaining_attempts(self, identifier: str) -> int:
        attempts = self._counter.get(normalize_identifier(identifier))
        return max(0, self._policy.max_attempts - attempts)

    def get_account_lock_remaining_time(self, identifier: str) -> int:
        """Seconds until the lock expires; 0 when unlocked or locked indefinitely."""
        return self._lock_state.remaining_seconds(normalize_identifier(identifier))

    def status(self, identifier: str) -> LockoutStatus:
        """Snapshot of counter and lock for one identifier.

        Built from several store reads, so it is not atomic with respect to
        concurrent writers.
        """
        key = normalize_identifier(identifier)
        attempts = self._counter.get(key)
        locked = self._lock_state.is_locked(key)
        if locked:
            state = LockoutState.LOCKED
        elif attempts > 0:
            state = LockoutState.WARNING
        else:
            state = LockoutState.CLEAN
        return LockoutStatus(
            identifier=key,
            state=state,
            attempts=attempts,
            remaining_attempts=max(0, self._policy.max_attempts - attempts),
            locked=locked,
            lock_remaining_seconds=self._lock_state.remaining_seconds(key) if locked else 0,
            indefinite=locked and self._lock_state.is_indefinite(key),
            locked_at=self._lock_state.locked_at(key) if locked else None,
        )

    # -- Administration ----------------------------------------------------

    def lock_account(
        self,
        identifier: str,
        reason: str | None = None,
        duration_seconds: int | None = None,
    ) -> None:
        """Lock an account manually.

        ``duration_seconds`` defaults to the policy's lock duration; ``0``
        locks indefinitely until :meth:`unlock_account`. An existing lock is
        overwritten with the new duration. *reason* is passed through to the
        log and the audit event, never interpreted.
        """
        key = normalize_identifier(identifier)
        duration = duration_seconds
        if duration is None:
            duration = self._policy.lock_duration_seconds
        if duration < 0:
            raise ValidationError(f"duration_seconds must be >= 0, got {duration}")

        self._lock_state.lock(key, duration)
        if duration == INDEFINITE:
            logger.warning(
                "Account %s locked indefinitely by administrator (reason: %s)", key, reason
            )
        else:
            logger.warning(
                "Account %s locked for %d seconds by administrator (reason: %s)",
                key,
                duration,
                reason,
            )
        emit_security_event(
            "lockout.admin.locked",
            identifier=key,
            details={
                "reason": reason,
                "duration_seconds": duration,
                "indefinite": duration == INDEFINITE,
            },
        )

    def unlock_account(self, identifier: str) -> None:
        """Remove the lock. The attempt counter is left untouched."""
        key = normalize_identifier(identifier)
        was_locked = self._lock_state.unlock(key)
        if was_locked:
            logger.info(
                "Account %s unlocked; %d failed attempts retained",
                key,
                self._counter.get(key),
            )
        else:
            logger.info("Unlock requested for %s, which was not locked", key)
        emit_security_event("lockout.unlocked", identifier=key, details={"was_locked": was_locked})

    def clear_login_failures(self, identifier: str) -> None:
        """Reset the attempt counter. An active lock stays in place."""
        key = normalize_identifier(identifier)
        previous = self._counter.get(key)
        if self._counter.clear(key):
            logger.info("Cleared %d failed attempts for %s", previous, key)
        else:
            logger.info("No failed attempts recorded for %s", key)
        emit_security_event(
            "lockout.failures.cleared", identifier=key, details={"previous_attempts": previous}
        )
