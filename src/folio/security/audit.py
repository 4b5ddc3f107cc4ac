"""Security audit events.

Small opt-in event channel for authentication and form-abuse telemetry.
Every event is also logged on ``folio.security``; a registered sink can
forward events elsewhere.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time
from typing import Any

logger = logging.getLogger("folio.security")


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """A structured security event."""

    name: str
    timestamp: float = field(default_factory=time)
    path: str | None = None
    method: str | None = None
    user_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


type SecurityEventSink = Callable[[SecurityEvent], None]


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
    request: Any | None = None,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Log a security event and hand it to the configured sink, if any."""
    path = getattr(request, "path", None) if request is not None else None
    method = getattr(request, "method", None) if request is not None else None

    logger.info("security event %s on %s %s %s", name, method, path, details or {})

    with _sink_lock:
        sink = _sink
    if sink is None:
        return

    sink(
        SecurityEvent(
            name=name,
            path=path,
            method=method,
            user_id=user_id,
            details=details or {},
        )
    )
