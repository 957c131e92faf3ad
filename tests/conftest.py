"""Shared fixtures for Zero-Trust Command Center tests."""

from __future__ import annotations

import random
from datetime import UTC, datetime
from typing import Any

import pytest

from zerotrust.contracts.event import SecurityEvent
from zerotrust.contracts.metrics import ThreatMetricSample
from zerotrust.simulator.errors import RemoteError
from zerotrust.simulator.scheduler import Scheduler

START = datetime(2026, 2, 26, 10, 0, 0, tzinfo=UTC)

# ── Helper: create SecurityEvent with sensible defaults ──────────────────


def make_event(
    *,
    id: str = "event_1",
    timestamp: str = "2026-02-26T10:00:00.000Z",
    attack_type: str = "ddos_attack",
    target: str = "gateway",
    severity: str = "high",
    agent: str = "Zero-Trust Agent Alpha",
    action: str = "IP blocked",
    status: str = "blocked",
    description: str = "Volumetric attack detected",
    source_ip: str = "203.0.113.10",
    location: str = "",
    user: str = "",
) -> SecurityEvent:
    return SecurityEvent(
        id=id,
        timestamp=timestamp,
        attack_type=attack_type,
        target=target,
        severity=severity,
        agent=agent,
        action=action,
        status=status,
        description=description,
        source_ip=source_ip,
        location=location,
        user=user,
    )


def make_sample(
    *,
    timestamp: str = "2026-02-26T10:00:01.500Z",
    threats_detected: int = 5,
    threats_blocked: int = 3,
    active_agents: int = 5,
    response_time_ms: int = 25,
) -> ThreatMetricSample:
    return ThreatMetricSample(
        timestamp=timestamp,
        threats_detected=threats_detected,
        threats_blocked=threats_blocked,
        active_agents=active_agents,
        response_time_ms=response_time_ms,
    )


# ── Random sources ───────────────────────────────────────────────────────


class ScriptedRandom(random.Random):
    """``random()`` returns the scripted values in order, then repeats the last.

    Integer draws (``randint``, ``getrandbits``) still come from the seeded
    generator, so picks stay deterministic too.
    """

    def __init__(self, values: list[float], seed: int = 0) -> None:
        super().__init__(seed)
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if len(self._values) > 1:
            return self._values.pop(0)
        return self._values[0]

    # defined here so randint() keeps drawing bits instead of calling random()
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


# ── Remote API doubles ───────────────────────────────────────────────────


class RecordingAPI:
    """Backend double that succeeds and records every call."""

    def __init__(self, simulation_id: str = "srv-123") -> None:
        self.simulation_id = simulation_id
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self.stops = 0
        self.closed = False

    def execute(self, simulation_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.executed.append((simulation_id, payload))
        return {"success": True, "simulation_id": self.simulation_id, "estimated_duration": 300}

    def stop_all(self) -> dict[str, Any]:
        self.stops += 1
        return {"success": True, "message": "stopped"}

    def status(self) -> list[dict[str, Any]]:
        return [{"id": self.simulation_id, "type": "ddos_attack", "status": "running"}]

    def close(self) -> None:
        self.closed = True


class FailingAPI:
    """Backend double whose every call raises *exc*."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or RemoteError("connection refused")
        self.calls = 0

    def execute(self, simulation_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls += 1
        raise self.exc

    def stop_all(self) -> dict[str, Any]:
        self.calls += 1
        raise self.exc

    def status(self) -> list[dict[str, Any]]:
        self.calls += 1
        raise self.exc

    def close(self) -> None:
        pass


class RefusingAPI(RecordingAPI):
    """Backend that answers, but with ``success: false``."""

    def execute(self, simulation_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.executed.append((simulation_id, payload))
        return {"success": False, "message": "simulations disabled"}


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler()


@pytest.fixture
def clock():
    return lambda: START
