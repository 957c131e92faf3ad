"""Alert inbox for messages pushed over the live channel.

Three message kinds are understood:

  security_alert   {severity, message?, ...}  -> prepended, status from severity
  system_status    {status} or "status"       -> status flag only
  threat_detected  {message, severity}        -> prepended as a threat alert

Anything else is ignored.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from zerotrust.contracts.alert import LiveAlert
from zerotrust.contracts.enums import SystemStatus
from zerotrust.simulator.bounded import BoundedLog
from zerotrust.simulator.events import _now, _ts

log = logging.getLogger(__name__)

ALERT_CAPACITY = 10

_STATUS_FOR_SEVERITY: dict[str, str] = {
    "critical": SystemStatus.ALERT.value,
    "high": SystemStatus.ALERT.value,
    "medium": SystemStatus.WARNING.value,
    "low": SystemStatus.SECURE.value,
}
_STATUSES = {s.value for s in SystemStatus}


def coarse_status(value: str) -> str | None:
    """Map a severity or status string onto secure / warning / alert."""
    value = str(value).lower()
    if value in _STATUSES:
        return value
    return _STATUS_FOR_SEVERITY.get(value)


class AlertInbox:
    """Newest-first alert log plus the system status flag."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _now,
        capacity: int = ALERT_CAPACITY,
    ) -> None:
        self.clock = clock
        self.alerts: BoundedLog[LiveAlert] = BoundedLog(capacity)
        self.system_status: str = SystemStatus.SECURE.value
        self._ids = itertools.count(1)

    def _set_status(self, value: Any) -> None:
        status = coarse_status(value)
        if status is None:
            log.debug("Ignoring unrecognised status %r", value)
            return
        if status != self.system_status:
            log.info("System status %s -> %s", self.system_status, status)
        self.system_status = status

    def _push(self, kind: str, message: str, severity: str, payload: dict[str, Any]) -> LiveAlert:
        now = self.clock()
        alert = LiveAlert(
            id=str(payload.get("id") or f"alert_{int(now.timestamp() * 1000)}_{next(self._ids)}"),
            kind=kind,
            message=message,
            severity=severity,
            timestamp=str(payload.get("timestamp") or _ts(now)),
            payload=payload,
        )
        self.alerts.push(alert)
        return alert

    def ingest(self, kind: str, payload: Any) -> bool:
        """Fold one message into the inbox; return False if it was ignored."""
        if kind == "security_alert":
            data = payload if isinstance(payload, dict) else {"message": str(payload)}
            severity = str(data.get("severity", "low"))
            self._push(kind, str(data.get("message", data.get("type", ""))), severity, data)
            self._set_status(severity)
            return True
        if kind == "system_status":
            value = payload.get("status") if isinstance(payload, dict) else payload
            self._set_status(value)
            return True
        if kind == "threat_detected":
            data = payload if isinstance(payload, dict) else {"message": str(payload)}
            self._push("threat", str(data.get("message", "")), str(data.get("severity", "low")),
                       data)
            return True
        log.debug("Ignoring live message of unknown kind %r", kind)
        return False

    def ingest_message(self, message: dict[str, Any]) -> bool:
        """Accept an envelope ``{"type": kind, "data": payload}``."""
        kind = message.get("type") or message.get("event")
        if not isinstance(kind, str):
            log.debug("Ignoring live message without a type")
            return False
        return self.ingest(kind, message.get("data", {}))

    def remove(self, alert_id: str) -> bool:
        """Dismiss one alert; the system status flag is left as is."""
        return self.alerts.remove_where(lambda a: a.id == alert_id) > 0

    def clear(self) -> None:
        self.alerts.clear()
