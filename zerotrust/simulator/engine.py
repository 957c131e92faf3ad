"""Оркестратор командного центру: контролер + таймери + журнали подій."""

from __future__ import annotations

import logging
import random as _random_mod
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from zerotrust.contracts.alert import LiveAlert
from zerotrust.contracts.event import SecurityEvent
from zerotrust.contracts.metrics import (
    KpiMetric,
    SystemMetrics,
    ThreatMapStats,
    ThreatMetricSample,
)
from zerotrust.contracts.network import NetworkNode, ThreatPulse
from zerotrust.contracts.simulation import SimulationRun
from zerotrust.remote.client import DemoSimulationAPI, SimulationAPI
from zerotrust.simulator.alerts import ALERT_CAPACITY, AlertInbox
from zerotrust.simulator.bounded import BoundedLog
from zerotrust.simulator.catalog import build_catalog, build_topology
from zerotrust.simulator.controller import SimulationController
from zerotrust.simulator.events import AGENT_ROSTER
from zerotrust.simulator.feeds import (
    MONITORING_CAPACITY,
    THREAT_MAP_CAPACITY,
    THREAT_MAP_PERIOD_SEC,
    MonitoringFeed,
    ThreatMapFeed,
)
from zerotrust.simulator.metrics import (
    KPI_TICK_SEC,
    METRICS_CAPACITY,
    KpiPanel,
    MetricsAggregator,
    next_system_metrics,
)
from zerotrust.simulator.network import MAX_PULSES, PULSE_TTL_SEC, NetworkStateMachine
from zerotrust.simulator.scheduler import Scheduler, Task

log = logging.getLogger(__name__)

EVENT_LOG_CAPACITY = 50
NETWORK_TICK_SEC = 1.5
METRICS_TICK_SEC = 1.5
SYSTEM_METRICS_TICK_SEC = 2.0


@dataclass(frozen=True)
class EngineSnapshot:
    """Everything a view needs to render one frame."""

    clock: str
    state: str
    run: SimulationRun | None
    nodes: list[NetworkNode]
    pulses: list[ThreatPulse]
    events: list[SecurityEvent]
    metrics: list[ThreatMetricSample]
    system_metrics: SystemMetrics
    monitoring: list[SecurityEvent]
    threats: list[SecurityEvent]
    threat_stats: ThreatMapStats
    kpis: list[KpiMetric]
    alerts: list[LiveAlert]
    system_status: str


class SimulationEngine:
    """Composition root of the simulation core.

    One ``Scheduler`` drives every timer.  Simulation timers (network
    tick, metrics, admin overview drift) exist only while the controller
    is running and are cancelled inside ``stop``.  The live feeds run from
    ``start_feeds`` until ``close``.

    All public methods take a single coarse lock so the dashboard's script
    threads can share one engine.
    """

    def __init__(
        self,
        cfg: dict[str, Any] | None = None,
        api: SimulationAPI | None = None,
        rng: _random_mod.Random | None = None,
        scheduler: Scheduler | None = None,
        start_time: datetime | None = None,
    ) -> None:
        cfg = cfg or {}
        timing: dict[str, Any] = cfg.get("timing", {})
        caps: dict[str, Any] = cfg.get("capacity", {})

        self.rng = rng or _random_mod.Random()
        self.scheduler = scheduler or Scheduler()
        self.sim_start = start_time or datetime.now(tz=timezone.utc)
        self._lock = threading.RLock()

        self.network_period = float(timing.get("network_tick_sec", NETWORK_TICK_SEC))
        self.metrics_period = float(timing.get("metrics_tick_sec", METRICS_TICK_SEC))
        self.system_period = float(timing.get("system_metrics_tick_sec", SYSTEM_METRICS_TICK_SEC))
        self.threat_map_period = float(timing.get("threat_map_tick_sec", THREAT_MAP_PERIOD_SEC))
        self.kpi_period = float(timing.get("kpi_tick_sec", KPI_TICK_SEC))

        roster = list(cfg.get("agents") or AGENT_ROSTER)
        self.catalog = build_catalog(cfg)
        self.events: BoundedLog[SecurityEvent] = BoundedLog(
            int(caps.get("events", EVENT_LOG_CAPACITY)))
        self.metrics = MetricsAggregator(
            self.rng, self.now, int(caps.get("metrics", METRICS_CAPACITY)), len(roster))
        self.network = NetworkStateMachine(
            build_topology(cfg), self.rng, self.scheduler, self.now,
            pulse_ttl=float(timing.get("pulse_ttl_sec", PULSE_TTL_SEC)),
            max_pulses=int(caps.get("pulses", MAX_PULSES)),
        )
        self.monitoring = MonitoringFeed(
            self.rng, self.now, int(caps.get("monitoring", MONITORING_CAPACITY)),
            tuple(timing.get("monitoring_jitter_sec", (2.0, 5.0))),  # type: ignore[arg-type]
        )
        self.threat_map = ThreatMapFeed(
            self.rng, self.now, int(caps.get("threat_map", THREAT_MAP_CAPACITY)))
        self.kpis = KpiPanel(self.rng)
        self.alerts = AlertInbox(self.now, int(caps.get("alerts", ALERT_CAPACITY)))
        self.system_metrics = SystemMetrics()

        self.controller = SimulationController(api or DemoSimulationAPI(self.rng),
                                               self.catalog, self.now)
        self.controller.on_start(self._on_start)
        self.controller.on_stop(self._on_stop)

        self._sim_tasks: list[Task] = []
        self._feed_tasks: list[Task] = []
        log.info(
            "Engine init: %d simulations, %d nodes, tick=%.1fs, start=%s",
            len(self.catalog), len(self.network.nodes), self.network_period,
            self.sim_start.isoformat(),
        )

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        """Wall-clock view of the scheduler's virtual time."""
        return self.sim_start + timedelta(seconds=self.scheduler.now)

    def advance(self, seconds: float) -> int:
        with self._lock:
            return self.scheduler.advance(seconds)

    def catch_up(self) -> int:
        with self._lock:
            return self.scheduler.catch_up()

    def run_realtime(self, duration: float | None = None, resolution: float = 0.25) -> None:
        self.scheduler.run_realtime(duration, resolution)

    # ------------------------------------------------------------------
    # Simulation control
    # ------------------------------------------------------------------

    @property
    def active_simulation_type(self) -> str | None:
        run = self.controller.run
        return run.attack_type if run is not None else None

    # Both sync to wall time first, so time that elapsed before the call is
    # replayed under the old state and the run is stamped with the real now.

    def start_simulation(self, simulation_id: str | None, intensity: str = "medium") -> SimulationRun:
        with self._lock:
            self.scheduler.sync()
            return self.controller.start(simulation_id, intensity)

    def stop_simulation(self) -> SimulationRun | None:
        with self._lock:
            self.scheduler.sync()
            return self.controller.stop()

    def _on_start(self, run: SimulationRun) -> None:
        self._cancel(self._sim_tasks)
        self.metrics.reset()
        self._sim_tasks = [
            self.scheduler.every(self.network_period, self._network_tick, name="network"),
            self.scheduler.every(self.metrics_period, self.metrics.tick, name="metrics"),
            self.scheduler.every(self.system_period, self._system_tick, name="system_metrics"),
        ]

    def _on_stop(self, run: SimulationRun | None) -> None:
        self._cancel(self._sim_tasks)
        self._sim_tasks = []
        self.network.tick(None)

    def _network_tick(self) -> None:
        for ev in self.network.tick(self.active_simulation_type):
            self.events.push(ev)

    def _system_tick(self) -> None:
        self.system_metrics = next_system_metrics(self.system_metrics, self.rng)

    # ------------------------------------------------------------------
    # Live feeds
    # ------------------------------------------------------------------

    def start_feeds(self) -> None:
        """Start the monitoring and threat-map feeds (idempotent)."""
        with self._lock:
            if self._feed_tasks:
                return
            self.threat_map.seed()
            self._feed_tasks = [
                self.scheduler.every(self.monitoring.next_delay, self._monitoring_tick,
                                     name="monitoring"),
                self.scheduler.every(self.threat_map_period, self.threat_map.tick,
                                     name="threat_map"),
                self.scheduler.every(self.kpi_period, self._kpi_tick, name="kpis"),
            ]

    def _monitoring_tick(self) -> None:
        self.monitoring.tick(self.controller.is_running)

    def _kpi_tick(self) -> None:
        self.kpis.tick(self.controller.is_running)

    def ingest(self, kind: str, payload: Any) -> bool:
        """Feed one inbound live-channel message into the alert inbox."""
        with self._lock:
            return self.alerts.ingest(kind, payload)

    def dismiss_alert(self, alert_id: str) -> bool:
        with self._lock:
            return self.alerts.remove(alert_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _cancel(self, tasks: list[Task]) -> None:
        for task in tasks:
            self.scheduler.cancel(task)

    @property
    def active_tasks(self) -> list[str]:
        return [t.name for t in self.scheduler.pending]

    def close(self) -> None:
        """Tear down the view: cancel every timer, reset the topology and
        release the backend client."""
        with self._lock:
            self._cancel(self._sim_tasks)
            self._cancel(self._feed_tasks)
            self._sim_tasks = []
            self._feed_tasks = []
            self.network.reset()
            self.scheduler.cancel_all()
            self.controller.api.close()
        log.info("Engine closed")

    def snapshot(self) -> EngineSnapshot:
        with self._lock:
            return EngineSnapshot(
                clock=self.now().isoformat(),
                state=self.controller.state.value,
                run=self.controller.run,
                nodes=[NetworkNode(n.id, n.name, n.type, n.status, n.x, n.y, list(n.connections))
                       for n in self.network.nodes],
                pulses=self.network.pulses,
                events=self.events.items(),
                metrics=self.metrics.samples.items(),
                system_metrics=SystemMetrics(
                    self.system_metrics.threats_blocked, self.system_metrics.active_sessions,
                    self.system_metrics.security_score, self.system_metrics.uptime),
                monitoring=self.monitoring.events.items(),
                threats=self.threat_map.threats.items(),
                threat_stats=ThreatMapStats(
                    self.threat_map.stats.total_threats, self.threat_map.stats.blocked,
                    self.threat_map.stats.active_incidents, self.threat_map.stats.last_update),
                kpis=list(self.kpis.metrics),
                alerts=self.alerts.alerts.items(),
                system_status=self.alerts.system_status,
            )
