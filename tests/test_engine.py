"""Integration tests for zerotrust.simulator.engine — timers + controller."""

from __future__ import annotations

import random

import httpx
import pytest

from tests.conftest import START, FailingAPI, RecordingAPI
from zerotrust.remote.client import HttpSimulationAPI
from zerotrust.simulator.engine import SimulationEngine
from zerotrust.simulator.errors import SimulationAlreadyRunningError
from zerotrust.simulator.metrics import DEFAULT_KPIS

_SIM_TASKS = {"network", "metrics", "system_metrics"}


def _engine(seed: int = 42, **kw) -> SimulationEngine:
    return SimulationEngine(rng=random.Random(seed), start_time=START, **kw)


def _leaked(engine: SimulationEngine) -> set[str]:
    """Simulation-owned timers still pending (pulse expiry included)."""
    return {n for n in engine.active_tasks if n in _SIM_TASKS or n.startswith("expire:")}


# ═══════════════════════════════════════════════════════════════════════════
#  Start → tick → stop
# ═══════════════════════════════════════════════════════════════════════════

class TestSimulationLifecycle:
    def test_ddos_three_ticks_in_four_and_a_half_seconds(self):
        engine = _engine()
        engine.start_simulation("ddos_attack", "high")
        engine.advance(4.5)
        snap = engine.snapshot()
        assert snap.state == "running"
        assert len(snap.metrics) == 3
        network_task = next(t for t in engine.scheduler.pending if t.name == "network")
        assert network_task.runs == 3
        assert snap.clock == "2026-02-26T10:00:04.500000+00:00"

    def test_ddos_only_gateway_and_firewall_alert(self):
        engine = _engine(seed=5)
        engine.start_simulation("ddos_attack")
        engine.advance(60)
        snap = engine.snapshot()
        assert snap.events
        assert {e.target for e in snap.events} <= {"gateway", "firewall"}
        statuses = {n.id: n.status for n in snap.nodes}
        for nid in ("server1", "server2", "endpoint1"):
            assert statuses[nid] == "normal"
        assert statuses["database"] == "secure"

    def test_metrics_monotonic_during_run(self):
        engine = _engine()
        engine.start_simulation("bot_attack")
        engine.advance(90)
        samples = list(reversed(engine.snapshot().metrics))
        for prev, cur in zip(samples, samples[1:]):
            assert cur.threats_detected >= prev.threats_detected
            assert cur.threats_blocked >= prev.threats_blocked
            assert cur.threats_blocked <= cur.threats_detected

    def test_stop_resets_topology_and_cancels_timers(self):
        engine = _engine()
        engine.start_simulation("ddos_attack")
        engine.advance(30)
        engine.stop_simulation()
        snap = engine.snapshot()
        assert snap.state == "idle"
        assert snap.run is None
        assert all(n.status == n.default_status for n in snap.nodes)
        assert snap.pulses == []
        assert _leaked(engine) == set()

        n_events, n_metrics = len(snap.events), len(snap.metrics)
        engine.advance(30)
        after = engine.snapshot()
        assert len(after.events) == n_events
        assert len(after.metrics) == n_metrics

    def test_restart_starts_fresh_metric_series(self):
        engine = _engine()
        engine.start_simulation("ddos_attack")
        engine.advance(60)
        engine.stop_simulation()
        engine.start_simulation("account_takeover")
        assert engine.snapshot().metrics == []
        engine.advance(1.5)
        assert len(engine.snapshot().metrics) == 1

    @pytest.mark.parametrize("cycles", [1, 5])
    def test_no_timer_leak_over_cycles(self, cycles):
        engine = _engine()
        for _ in range(cycles):
            engine.start_simulation("data_exfiltration")
            engine.advance(10)
            engine.stop_simulation()
        assert _leaked(engine) == set()

    def test_second_start_rejected_and_timers_not_doubled(self):
        engine = _engine()
        engine.start_simulation("ddos_attack")
        with pytest.raises(SimulationAlreadyRunningError):
            engine.start_simulation("ddos_attack")
        names = [n for n in engine.active_tasks if n in _SIM_TASKS]
        assert sorted(names) == sorted(_SIM_TASKS)

    def test_backend_down_runs_in_demo_mode(self):
        engine = _engine(api=FailingAPI())
        run = engine.start_simulation("ddos_attack")
        assert run.demo_mode
        assert run.simulation_id.startswith("demo_")
        engine.advance(3)
        assert len(engine.snapshot().metrics) == 2
        engine.stop_simulation()
        assert engine.snapshot().state == "idle"

    def test_system_metrics_drift_only_while_running(self):
        engine = _engine()
        before = engine.snapshot().system_metrics
        engine.advance(10)
        assert engine.snapshot().system_metrics == before
        engine.start_simulation("api_abuse")
        engine.advance(10)
        assert engine.snapshot().system_metrics.threats_blocked >= before.threats_blocked

    def test_event_log_capped(self):
        engine = _engine(cfg={"capacity": {"events": 5}})
        engine.start_simulation("ddos_attack")
        engine.advance(300)
        assert len(engine.snapshot().events) == 5

    def test_seeded_runs_are_reproducible(self):
        a, b = _engine(seed=9), _engine(seed=9)
        for engine in (a, b):
            engine.start_simulation("ddos_attack")
            engine.advance(45)
        assert [e.to_dict() for e in a.snapshot().events] == [
            e.to_dict() for e in b.snapshot().events
        ]


# ═══════════════════════════════════════════════════════════════════════════
#  Feeds + alerts
# ═══════════════════════════════════════════════════════════════════════════

class TestFeeds:
    def test_start_feeds_is_idempotent(self):
        engine = _engine()
        engine.start_feeds()
        engine.start_feeds()
        assert sorted(engine.active_tasks) == ["kpis", "monitoring", "threat_map"]
        assert len(engine.snapshot().threats) == 5

    def test_feeds_run_while_idle(self):
        engine = _engine()
        engine.start_feeds()
        engine.advance(30)
        snap = engine.snapshot()
        assert 6 <= len(snap.monitoring) <= 10
        assert all(e.status == "investigating" for e in snap.monitoring)
        assert snap.threat_stats.total_threats <= 10

    def test_monitoring_follows_simulation_state(self):
        engine = _engine()
        engine.start_feeds()
        engine.start_simulation("ddos_attack")
        engine.advance(30)
        assert all(e.status == "blocked" for e in engine.snapshot().monitoring)

    def test_stop_keeps_feeds_running(self):
        engine = _engine()
        engine.start_feeds()
        engine.start_simulation("ddos_attack")
        engine.advance(5)
        engine.stop_simulation()
        assert {"monitoring", "threat_map"} <= set(engine.active_tasks)

    def test_close_cancels_everything(self):
        engine = _engine()
        engine.start_feeds()
        engine.start_simulation("ddos_attack")
        engine.advance(5)
        engine.close()
        assert engine.active_tasks == []
        assert engine.advance(60) == 0

    def test_ingest_updates_alerts(self):
        engine = _engine()
        assert engine.ingest("security_alert", {"severity": "critical", "message": "breach"})
        assert engine.ingest("ping", {}) is False
        snap = engine.snapshot()
        assert snap.system_status == "alert"
        assert snap.alerts[0].message == "breach"

    def test_dismiss_alert_keeps_status(self):
        engine = _engine()
        engine.ingest("security_alert", {"severity": "critical", "message": "breach"})
        alert_id = engine.snapshot().alerts[0].id
        assert engine.dismiss_alert(alert_id)
        snap = engine.snapshot()
        assert snap.alerts == []
        assert snap.system_status == "alert"
        assert engine.dismiss_alert(alert_id) is False

    def test_kpis_tick_every_five_seconds(self):
        engine = _engine()
        engine.start_feeds()
        assert engine.snapshot().kpis == list(DEFAULT_KPIS)
        engine.advance(10)
        task = next(t for t in engine.scheduler.pending if t.name == "kpis")
        assert task.runs == 2
        assert engine.snapshot().kpis != list(DEFAULT_KPIS)

    def test_kpis_follow_running_simulation(self):
        engine = _engine()
        engine.start_feeds()
        engine.start_simulation("ddos_attack")
        engine.advance(5)
        kpis = {k.name: k for k in engine.snapshot().kpis}
        assert 132 <= kpis["Threats Blocked"].value <= 141
        assert kpis["Threats Blocked"].trend == "up"
        assert kpis["Response Time"].value < 1.2
        assert kpis["Response Time"].trend == "down"


class TestSnapshot:
    def test_snapshot_is_detached(self):
        engine = _engine()
        snap = engine.snapshot()
        engine.start_simulation("ddos_attack")
        engine.advance(30)
        assert all(n.status == n.default_status for n in snap.nodes)
        assert snap.metrics == []

    def test_catalog_and_topology_defaults(self):
        engine = _engine()
        assert len(engine.catalog) == 6
        assert len(engine.snapshot().nodes) == 6


# ═══════════════════════════════════════════════════════════════════════════
#  Wall clock: start / stop catch up before switching state
# ═══════════════════════════════════════════════════════════════════════════

class TestWallClockSync:
    @pytest.fixture
    def wall(self, monkeypatch):
        now = [100.0]
        monkeypatch.setattr("zerotrust.simulator.scheduler.time.monotonic", lambda: now[0])
        return now

    def test_idle_time_before_start_is_not_replayed(self, wall):
        engine = _engine()
        engine.catch_up()
        wall[0] = 160.0
        run = engine.start_simulation("ddos_attack")
        assert run.started_at == "2026-02-26T10:01:00.000Z"

        wall[0] = 160.1
        engine.catch_up()
        snap = engine.snapshot()
        assert snap.metrics == []
        assert snap.events == []
        engine.advance(4.5)
        assert len(engine.snapshot().metrics) == 3

    def test_nothing_fires_after_stop(self, wall):
        engine = _engine()
        engine.catch_up()
        engine.start_simulation("ddos_attack")
        wall[0] = 104.5
        engine.catch_up()
        assert len(engine.snapshot().metrics) == 3

        # the 1.5 s before the stop call still belong to the run
        wall[0] = 106.0
        engine.stop_simulation()
        snap = engine.snapshot()
        assert len(snap.metrics) == 4
        assert _leaked(engine) == set()

        wall[0] = 166.0
        engine.catch_up()
        after = engine.snapshot()
        assert len(after.metrics) == 4
        assert len(after.events) == len(snap.events)
        assert all(n.status == n.default_status for n in after.nodes)

    def test_virtual_time_engine_ignores_wall_clock(self, wall):
        engine = _engine()
        wall[0] = 400.0
        engine.start_simulation("ddos_attack")
        assert engine.scheduler.now == 0.0
        assert engine.snapshot().run.started_at == "2026-02-26T10:00:00.000Z"


class TestClose:
    def test_close_releases_injected_backend(self):
        api = RecordingAPI()
        engine = _engine(api=api)
        engine.close()
        assert api.closed

    def test_close_releases_http_client(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"success": True}))
        api = HttpSimulationAPI(transport=transport)
        engine = _engine(api=api)
        engine.close()
        assert api._client.is_closed
