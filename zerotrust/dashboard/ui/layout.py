"""Page layout — gate, sidebar controls and header.

``render_sidebar`` draws the simulation controls and drives the engine's
start/stop directly.  ``render_gate`` shows the demo password form until
the session is unlocked.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from datetime import timedelta
from typing import Any

import streamlit as st

from zerotrust.contracts.simulation import SimulationRun
from zerotrust.dashboard.gate import DEMO_PASSWORD, GATE_VALIDITY, is_unlocked, lock, unlock
from zerotrust.simulator.engine import SimulationEngine
from zerotrust.simulator.errors import SimulationError

NOTICE_KEY = "sidebar_notice"
DEMO_MODE_NOTICE = "Backend unavailable. Running in demo mode."


def remember_start(session: MutableMapping[str, Any], run: SimulationRun) -> None:
    """Keep the demo-mode notice across the rerun that follows a start."""
    if run.demo_mode:
        session[NOTICE_KEY] = DEMO_MODE_NOTICE
    else:
        session.pop(NOTICE_KEY, None)


def pending_notice(session: MutableMapping[str, Any], run: SimulationRun | None) -> str | None:
    """Notice to show for *run*; dropped once the run is gone."""
    if run is None or not run.demo_mode:
        session.pop(NOTICE_KEY, None)
        return None
    return session.get(NOTICE_KEY)


# ── header ──────────────────────────────────────────────────────────────────


def render_header() -> None:
    st.markdown(
        '<h1 class="page-title">Security Command Center</h1>'
        '<p class="page-subtitle">'
        "Real-time Zero-Trust security monitoring, threat detection and attack simulation."
        "</p>",
        unsafe_allow_html=True,
    )


# ── gate ────────────────────────────────────────────────────────────────────


def render_gate(gate_cfg: dict) -> bool:
    """Return True if the session is unlocked, else draw the login form."""
    validity = timedelta(hours=float(gate_cfg.get("validity_hours",
                                                   GATE_VALIDITY.total_seconds() / 3600)))
    if is_unlocked(st.session_state, validity=validity):
        return True

    expected = str(gate_cfg.get("password", DEMO_PASSWORD))
    st.markdown('<h2 class="page-title">Security Access Required</h2>', unsafe_allow_html=True)
    with st.form("security_gate"):
        password = st.text_input("Security password", type="password")
        submitted = st.form_submit_button("Access Security Dashboard")
    st.caption(f"For demonstration purposes, the password is: `{expected}`")
    if submitted:
        if unlock(st.session_state, password, expected):
            st.rerun()
        st.error("Invalid password. Please contact your security administrator.")
    return False


# ── sidebar ─────────────────────────────────────────────────────────────────


def render_sidebar(engine: SimulationEngine) -> None:
    """Simulation controls: pick an attack, set intensity, start / stop."""
    running = engine.controller.is_running
    with st.sidebar:
        st.markdown('<p class="sidebar-brand">Zero-Trust</p>', unsafe_allow_html=True)
        st.caption("Attack Simulation Controls")
        st.divider()

        catalog = engine.catalog
        st.markdown("##### Attack")
        st.radio(
            "Attack simulation",
            options=list(catalog),
            format_func=lambda sid: f"{catalog[sid].name} · {catalog[sid].severity}",
            index=None,
            key="selected_simulation",
            disabled=running,
            label_visibility="collapsed",
        )
        selected = st.session_state.get("selected_simulation")
        if selected:
            st.caption(catalog[selected].description)

        st.markdown("##### Intensity")
        st.segmented_control(
            "Intensity",
            options=["low", "medium", "high"],
            key="intensity",
            disabled=running,
            label_visibility="collapsed",
        )

        col_start, col_stop = st.columns(2)
        if col_start.button("Start", type="primary", disabled=running, use_container_width=True):
            try:
                run = engine.start_simulation(selected, st.session_state.get("intensity") or "medium")
            except SimulationError as exc:
                st.error(str(exc))
            else:
                remember_start(st.session_state, run)
                st.rerun()
        if col_stop.button("Stop", disabled=not running, use_container_width=True):
            engine.stop_simulation()
            st.rerun()

        run = engine.controller.run
        notice = pending_notice(st.session_state, run)
        if notice:
            st.info(notice)
        st.divider()
        if run is not None:
            st.markdown(f"**Simulation Active** · `{run.simulation_id}`")
            st.caption(f"{run.simulation.name}, intensity {run.intensity}")
        else:
            st.markdown("**Ready**")

        st.divider()
        st.toggle("Auto-refresh", key="auto_refresh")
        if st.button("Lock dashboard", use_container_width=True):
            lock(st.session_state)
            st.rerun()
