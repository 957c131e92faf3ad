"""Metric samples shown on the command-center panels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ThreatMetricSample:
    """One metrics tick of a running simulation.

    Counters are cumulative within a run: ``threats_detected`` and
    ``threats_blocked`` never decrease and blocked never exceeds detected.
    ``response_time_ms`` is drawn fresh every sample.
    """

    timestamp: str
    threats_detected: int
    threats_blocked: int
    active_agents: int
    response_time_ms: int


@dataclass(slots=True)
class SystemMetrics:
    """Admin overview counters that drift while a simulation runs."""

    threats_blocked: int = 127
    active_sessions: int = 1248
    security_score: float = 96.0
    uptime: str = "99.8%"


@dataclass(slots=True)
class ThreatMapStats:
    """Running totals for the threat-map feed."""

    total_threats: int = 0
    blocked: int = 0
    active_incidents: int = 0
    last_update: str = ""


@dataclass(frozen=True, slots=True)
class KpiMetric:
    """One tile of the real-time monitoring KPI panel."""

    name: str
    value: float
    change: float
    trend: str              # up | down | stable
