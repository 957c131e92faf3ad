"""Головний файл дашборду Zero-Trust Command Center на Streamlit."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="Zero-Trust Security Command Center",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── inject theme CSS ────────────────────────────────────────────────────────

_CSS_PATH = Path(__file__).resolve().parent / "styles" / "theme.css"
if _CSS_PATH.exists():
    st.markdown(f"<style>{_CSS_PATH.read_text()}</style>", unsafe_allow_html=True)

# ── local imports (after page config) ───────────────────────────────────────

from zerotrust.dashboard.data_access import (  # noqa: E402
    events_frame,
    metrics_frame,
    severity_counts,
)
from zerotrust.dashboard.ui.cards import kpi_card, system_status_card  # noqa: E402
from zerotrust.dashboard.ui.charts import (  # noqa: E402
    CHART_CONFIG,
    metrics_line,
    severity_bar,
    topology_figure,
)
from zerotrust.dashboard.ui.layout import (  # noqa: E402
    render_gate,
    render_header,
    render_sidebar,
)
from zerotrust.dashboard.ui.state import get_engine, init_state  # noqa: E402
from zerotrust.dashboard.ui.tables import render_event_table  # noqa: E402
from zerotrust.shared.logger import setup_logging  # noqa: E402

setup_logging()
init_state()
engine = get_engine()

if not render_gate(st.session_state.get("gate_cfg", {})):
    st.stop()

render_sidebar(engine)
render_header()


# ═════════════════════════════════════════════════════════════════════════════
#   LIVE SECTION -- a fragment re-runs on its own timer, advancing the
#   engine's clock to wall time before rendering a fresh snapshot.
# ═════════════════════════════════════════════════════════════════════════════

_auto = st.session_state.get("auto_refresh", True)
_interval = float(st.session_state.get("refresh_interval", 1.5))


@st.fragment(run_every=timedelta(seconds=_interval) if _auto else None)
def _live_section() -> None:
    engine.catch_up()
    snap = engine.snapshot()
    latest = snap.metrics[0] if snap.metrics else None

    # ── KPI row ─────────────────────────────────────────────────────────
    c1, c2, c3, c4 = st.columns(4)
    c1.markdown(system_status_card(snap.system_status), unsafe_allow_html=True)
    c2.markdown(
        kpi_card("Active Agents", str(latest.active_agents if latest else 5),
                 "Zero-Trust agents monitoring"),
        unsafe_allow_html=True,
    )
    c3.markdown(
        kpi_card("Threats Blocked", str(snap.system_metrics.threats_blocked),
                 f"{snap.system_metrics.active_sessions} active sessions"),
        unsafe_allow_html=True,
    )
    c4.markdown(
        kpi_card("Security Score", f"{snap.system_metrics.security_score:.0f}",
                 "High risk" if snap.run else "Low risk"),
        unsafe_allow_html=True,
    )

    tab_net, tab_mon, tab_threats, tab_alerts = st.tabs(
        ["Network Topology", "Real-time Monitoring", "Threat Map", "Live Alerts"]
    )

    with tab_net:
        left, right = st.columns([3, 2])
        left.plotly_chart(topology_figure(snap.nodes, snap.pulses),
                          use_container_width=True, config=CHART_CONFIG)
        df_events = events_frame(snap.events)
        right.plotly_chart(severity_bar(severity_counts(df_events)),
                           use_container_width=True, config=CHART_CONFIG)
        st.plotly_chart(metrics_line(metrics_frame(snap.metrics)),
                        use_container_width=True, config=CHART_CONFIG)
        if latest is not None:
            st.caption(
                f"Detected {latest.threats_detected} · blocked {latest.threats_blocked} · "
                f"response {latest.response_time_ms} ms"
            )
        render_event_table(df_events, key="tbl_network",
                           empty_msg="Start a simulation to see agent activity.")

    with tab_mon:
        tiles = st.columns(len(snap.kpis))
        for col, kpi in zip(tiles, snap.kpis):
            col.metric(kpi.name, f"{kpi.value:g}", delta=f"{kpi.change:+g}",
                       delta_color="off" if kpi.trend == "stable" else "normal")
        render_event_table(events_frame(snap.monitoring), key="tbl_monitoring")

    with tab_threats:
        s = snap.threat_stats
        m1, m2, m3 = st.columns(3)
        m1.metric("Total Threats", s.total_threats)
        m2.metric("Blocked", s.blocked)
        m3.metric("Active Incidents", s.active_incidents)
        render_event_table(events_frame(snap.threats), key="tbl_threats")

    with tab_alerts:
        if not snap.alerts:
            st.info("No alerts from the live channel.")
        for alert in snap.alerts:
            text_col, btn_col = st.columns([8, 1])
            text_col.markdown(f"**{alert.severity.upper()}** · {alert.message} · `{alert.timestamp}`")
            if btn_col.button("Dismiss", key=f"dismiss_{alert.id}"):
                engine.dismiss_alert(alert.id)
                st.rerun(scope="fragment")


_live_section()
