"""Tests for zerotrust.dashboard.ui.layout — sidebar notices across reruns."""

from __future__ import annotations

from zerotrust.contracts.simulation import SimulationRun
from zerotrust.dashboard.ui.layout import (
    DEMO_MODE_NOTICE,
    NOTICE_KEY,
    pending_notice,
    remember_start,
)
from zerotrust.simulator.catalog import build_catalog


def _run(demo_mode: bool) -> SimulationRun:
    return SimulationRun(
        simulation=build_catalog({})["ddos_attack"],
        simulation_id="demo_1" if demo_mode else "srv-1",
        intensity="high",
        started_at="2026-02-26T10:00:00.000Z",
        payload={},
        demo_mode=demo_mode,
    )


class TestDemoModeNotice:
    def test_survives_rerun_after_demo_start(self):
        session: dict = {}
        run = _run(demo_mode=True)
        remember_start(session, run)
        # next script run: the notice is still there
        assert pending_notice(session, run) == DEMO_MODE_NOTICE
        assert pending_notice(session, run) == DEMO_MODE_NOTICE

    def test_backend_start_has_no_notice(self):
        session: dict = {NOTICE_KEY: DEMO_MODE_NOTICE}
        run = _run(demo_mode=False)
        remember_start(session, run)
        assert NOTICE_KEY not in session
        assert pending_notice(session, run) is None

    def test_dropped_after_stop(self):
        session: dict = {}
        remember_start(session, _run(demo_mode=True))
        assert pending_notice(session, None) is None
        assert session == {}
