"""Login guard — the authentication flow's side of the lockout contract.

Wraps a credential check so callers cannot get the ordering wrong: the
lock is checked before verification, and a locked account never reaches
``verify`` or ``record_login_failure``.

Usage::

    guard = LoginGuard(engine)
    outcome = guard.authenticate(email, lambda: verify_password(password, user.password_hash))
    if not outcome.ok:
        return error_response(outcome.result.value, outcome.message)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from bastion.engine import LockoutEngine
from bastion.errors import StoreUnavailable

logger = logging.getLogger("bastion.guard")


class LoginResult(Enum):
    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    LOCKED = "locked"
    LOCKED_BY_ATTEMPTS = "locked_by_attempts"


def format_duration(seconds: int) -> str:
    """Render a retry-after value as ``"29 min 5 s"`` / ``"40 s"``."""
    minutes, secs = divmod(max(0, seconds), 60)
    if minutes:
        return f"{minutes} min {secs} s"
    return f"{secs} s"


@dataclass(frozen=True, slots=True)
class LoginOutcome:
    """Result of one guarded login attempt."""

    result: LoginResult
    attempts: int = 0
    remaining_attempts: int = 0
    retry_after: int = 0

    @property
    def ok(self) -> bool:
        return self.result is LoginResult.SUCCESS

    @property
    def message(self) -> str:
        match self.result:
            case LoginResult.SUCCESS:
                return "Login successful."
            case LoginResult.INVALID_CREDENTIALS:
                return (
                    "Invalid credentials. "
                    f"{self.remaining_attempts} attempt(s) left before the account is locked."
                )
            case LoginResult.LOCKED_BY_ATTEMPTS:
                return (
                    "Invalid credentials. The account has been locked after too many failed "
                    f"attempts; try again in {format_duration(self.retry_after)}."
                )
            case LoginResult.LOCKED:
                if self.retry_after:
                    return f"Account is locked; try again in {format_duration(self.retry_after)}."
                return "Account is locked; contact an administrator."


class LoginGuard:
    """Run a credential check under lockout protection."""

    __slots__ = ("_engine",)

    def __init__(self, engine: LockoutEngine) -> None:
        self._engine = engine

    def _retry_after(self, identifier: str) -> int:
        try:
            return self._engine.get_account_lock_remaining_time(identifier)
        except StoreUnavailable as exc:
            logger.warning("Lock remaining time unavailable for %s: %s", identifier, exc)
            return 0

    def authenticate(self, identifier: str, verify: Callable[[], bool]) -> LoginOutcome:
        engine = self._engine
        if engine.is_account_locked(identifier):
            return LoginOutcome(
                LoginResult.LOCKED,
                retry_after=self._retry_after(identifier),
            )

        if verify():
            engine.record_login_success(identifier)
            return LoginOutcome(LoginResult.SUCCESS)

        attempts = engine.record_login_failure(identifier)
        remaining = max(0, engine.policy.max_attempts - attempts)
        if remaining == 0 and engine.is_account_locked(identifier):
            return LoginOutcome(
                LoginResult.LOCKED_BY_ATTEMPTS,
                attempts=attempts,
                retry_after=self._retry_after(identifier),
            )
        return LoginOutcome(
            LoginResult.INVALID_CREDENTIALS,
            attempts=attempts,
            remaining_attempts=remaining,
        )
