"""Lockout audit events.

Small opt-in event channel for lock, unlock, and fail-open telemetry.
Applications register a sink to forward events to logs, metrics, an
audit table, or an alerting pipeline. Persisting them is the sink's job.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time
from typing import Any

logger = logging.getLogger("bastion.audit")


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """A structured lockout event."""

    name: str
    identifier: str | None = None
    timestamp: float = field(default_factory=time)
    details: dict[str, Any] = field(default_factory=dict)


SecurityEventSink = Callable[[SecurityEvent], None]


_sink_lock = threading.Lock()
_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Set a process-wide sink for security events.

    Pass ``None`` to disable event delivery.
    """
    global _sink
    with _sink_lock:
        _sink = sink


def emit_security_event(
    name: str,
    *,
    identifier: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit a best-effort security event to the configured sink.

    A failing sink is logged and never interrupts the caller.
    """
    with _sink_lock:
        sink = _sink
    if sink is None:
        return
    try:
        sink(SecurityEvent(name=name, identifier=identifier, details=details or {}))
    except Exception:
        logger.exception("Security event sink failed for %s", name)
