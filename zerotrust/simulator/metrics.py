"""Rolling threat metrics for an active simulation.

Sampling rules
──────────────
  first sample      detected = U{0..9}, blocked = U{0..7}
  next samples      detected += U{0..2}, blocked += U{0..1}
  always            blocked <= detected (clamped), active_agents = roster size,
                    response_time_ms = U{10..59} drawn fresh

KPI panel (every 5 s, run or not)
─────────────────────────────────
  running           threats blocked += U{5..14}, investigations += U{1..3},
                    risk score += U{10..24}, response time -= U(0.1, 0.6)
  idle              every tile += U(-5, 5)
  always            value floored at 0, one decimal
"""

from __future__ import annotations

import logging
import random as _random_mod
from collections.abc import Callable
from datetime import datetime

from zerotrust.contracts.metrics import KpiMetric, SystemMetrics, ThreatMetricSample
from zerotrust.simulator.bounded import BoundedLog
from zerotrust.simulator.events import AGENT_ROSTER, _now, _ts

log = logging.getLogger(__name__)

METRICS_CAPACITY = 100


def next_sample(
    previous: ThreatMetricSample | None,
    rng: _random_mod.Random,
    now: datetime | None = None,
    active_agents: int = len(AGENT_ROSTER),
) -> ThreatMetricSample:
    """Derive the next metrics sample from *previous* (or seed a first one)."""
    if previous is None:
        detected = rng.randint(0, 9)
        blocked = rng.randint(0, 7)
    else:
        detected = previous.threats_detected + rng.randint(0, 2)
        blocked = previous.threats_blocked + rng.randint(0, 1)
    # blocked can only lag detected; previous.blocked <= previous.detected
    # keeps the clamped value non-decreasing too
    blocked = min(blocked, detected)

    return ThreatMetricSample(
        timestamp=_ts(now or _now()),
        threats_detected=detected,
        threats_blocked=blocked,
        active_agents=active_agents,
        response_time_ms=rng.randint(10, 59),
    )


class MetricsAggregator:
    """Keeps the last ``capacity`` samples of the current run, newest first."""

    def __init__(
        self,
        rng: _random_mod.Random,
        clock: Callable[[], datetime] = _now,
        capacity: int = METRICS_CAPACITY,
        active_agents: int = len(AGENT_ROSTER),
    ) -> None:
        self.rng = rng
        self.clock = clock
        self.active_agents = active_agents
        self.samples: BoundedLog[ThreatMetricSample] = BoundedLog(capacity)

    @property
    def latest(self) -> ThreatMetricSample | None:
        return self.samples.latest

    def tick(self) -> ThreatMetricSample:
        sample = next_sample(self.samples.latest, self.rng, self.clock(), self.active_agents)
        self.samples.push(sample)
        log.debug(
            "metrics: detected=%d blocked=%d rt=%dms",
            sample.threats_detected, sample.threats_blocked, sample.response_time_ms,
        )
        return sample

    def reset(self) -> None:
        self.samples.clear()


# ── real-time monitoring KPI panel ──────────────────────────────────────

KPI_TICK_SEC = 5.0

DEFAULT_KPIS: list[KpiMetric] = [
    KpiMetric("Threats Blocked", 127, 15, "up"),
    KpiMetric("Active Investigations", 3, 2, "up"),
    KpiMetric("Risk Score", 23, -8, "down"),
    KpiMetric("Response Time", 1.2, -0.3, "down"),
]


def _kpi_change(name: str, simulation_active: bool, rng: _random_mod.Random) -> float:
    if not simulation_active:
        return (rng.random() - 0.5) * 10
    if name == "Threats Blocked":
        return rng.randint(5, 14)
    if name == "Active Investigations":
        return rng.randint(1, 3)
    if name == "Risk Score":
        return rng.randint(10, 24)
    if name == "Response Time":
        return -(rng.random() * 0.5 + 0.1)
    return 0.0


def next_kpi(metric: KpiMetric, simulation_active: bool, rng: _random_mod.Random) -> KpiMetric:
    """Move one KPI tile a step: pressure during a run, noise otherwise.

    Values are floored at 0 and rounded to one decimal, like the change.
    """
    change = _kpi_change(metric.name, simulation_active, rng)
    return KpiMetric(
        name=metric.name,
        value=max(0.0, round(metric.value + change, 1)),
        change=round(change, 1),
        trend="up" if change > 0 else "down" if change < 0 else "stable",
    )


class KpiPanel:
    """The four monitoring KPIs, refreshed every ``KPI_TICK_SEC``."""

    def __init__(self, rng: _random_mod.Random) -> None:
        self.rng = rng
        self.metrics: list[KpiMetric] = list(DEFAULT_KPIS)

    def tick(self, simulation_active: bool) -> list[KpiMetric]:
        self.metrics = [next_kpi(m, simulation_active, self.rng) for m in self.metrics]
        return self.metrics


def next_system_metrics(previous: SystemMetrics, rng: _random_mod.Random) -> SystemMetrics:
    """Drift the admin overview counters one step (every 2 s during a run)."""
    score = previous.security_score + (rng.random() - 0.5) * 4
    return SystemMetrics(
        threats_blocked=previous.threats_blocked + rng.randint(0, 4),
        active_sessions=max(0, previous.active_sessions + rng.randint(-10, 9)),
        security_score=round(max(75.0, min(100.0, score)), 1),
        uptime=previous.uptime,
    )
