"""Lockout policy and deployment settings.

LockoutPolicy is a frozen dataclass passed into the engine, never read from
ambient state. Settings bundles the policy with store wiring and is the only
place environment variables are consulted.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from bastion.errors import ConfigurationError

ENV_PREFIX = "BASTION_"


class FailMode(Enum):
    """Behaviour of the authentication path when the store is unreachable."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class LockoutPolicy:
    """Lockout thresholds. Immutable after creation.

    Defaults lock an account for 30 minutes after 5 failures that each
    arrived within an hour of the previous one::

        policy = LockoutPolicy(max_attempts=3, lock_duration_seconds=600)
    """

    max_attempts: int = 5
    attempt_window_seconds: int = 3600
    lock_duration_seconds: int = 1800

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.attempt_window_seconds < 1:
            raise ConfigurationError(
                f"attempt_window_seconds must be at least 1, got {self.attempt_window_seconds}"
            )
        # 0 is reserved for indefinite administrative locks, not automatic ones.
        if self.lock_duration_seconds < 1:
            raise ConfigurationError(
                f"lock_duration_seconds must be at least 1, got {self.lock_duration_seconds}"
            )


@dataclass(frozen=True, slots=True)
class Settings:
    """Deployment settings: store wiring, key namespace, fail mode, policy."""

    store_url: str = "memory://"
    key_prefix: str = ""
    fail_mode: FailMode = FailMode.OPEN
    socket_timeout: float = 5.0
    policy: LockoutPolicy = field(default_factory=LockoutPolicy)

    def __post_init__(self) -> None:
        if self.socket_timeout <= 0:
            raise ConfigurationError(f"socket_timeout must be positive, got {self.socket_timeout}")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def _fail_mode(env: Mapping[str, str]) -> FailMode:
    raw = env.get(ENV_PREFIX + "FAIL_MODE")
    if raw is None or raw.strip() == "":
        return FailMode.OPEN
    try:
        return FailMode(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(mode.value for mode in FailMode)
        raise ConfigurationError(
            f"{ENV_PREFIX}FAIL_MODE must be one of: {allowed}; got {raw!r}"
        ) from None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from ``BASTION_*`` environment variables.

    Unset variables fall back to the dataclass defaults.
    """
    env = os.environ if environ is None else environ
    defaults = LockoutPolicy()
    policy = LockoutPolicy(
        max_attempts=_int(env, "MAX_ATTEMPTS", defaults.max_attempts),
        attempt_window_seconds=_int(env, "ATTEMPT_WINDOW", defaults.attempt_window_seconds),
        lock_duration_seconds=_int(env, "LOCK_DURATION", defaults.lock_duration_seconds),
    )
    return Settings(
        store_url=env.get(ENV_PREFIX + "STORE_URL") or "memory://",
        key_prefix=env.get(ENV_PREFIX + "KEY_PREFIX", ""),
        fail_mode=_fail_mode(env),
        socket_timeout=_float(env, "SOCKET_TIMEOUT", 5.0),
        policy=policy,
    )
