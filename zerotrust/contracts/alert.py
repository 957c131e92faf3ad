"""Модель вхідного оповіщення (LiveAlert)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class LiveAlert:
    """Alert pushed by the live channel and folded into the alert inbox."""

    id: str
    kind: str  # security_alert | threat_detected
    message: str
    severity: str  # low | medium | high | critical
    timestamp: str  # ISO-8601
    payload: dict[str, Any] = field(default_factory=dict)
