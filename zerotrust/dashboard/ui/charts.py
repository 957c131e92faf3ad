"""Білдери Plotly графіків."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from zerotrust.contracts.network import NetworkNode, ThreatPulse
from zerotrust.dashboard.ui.cards import SEVERITY_COLORS, STATUS_COLORS

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

# ── shared layout ───────────────────────────────────────────────────────────

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13, color="#c9d1d9")

_LAYOUT: dict = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14, color="#e6edf3"), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    height=340,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"
_EDGE_COLOR = "rgba(148,163,184,0.45)"
_PULSE_COLOR = "#ef4444"


def _base(**overrides: object) -> dict:
    merged = {**_LAYOUT}
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


# ── network topology ────────────────────────────────────────────────────────


def topology_figure(nodes: list[NetworkNode], pulses: list[ThreatPulse]) -> go.Figure:
    """Nodes coloured by status, edges from ``connections``, pulses in red."""
    pos = {n.id: (n.x, -n.y) for n in nodes}
    fig = go.Figure()

    edge_x: list[float | None] = []
    edge_y: list[float | None] = []
    for n in nodes:
        for target in n.connections:
            if target not in pos:
                continue
            edge_x += [pos[n.id][0], pos[target][0], None]
            edge_y += [pos[n.id][1], pos[target][1], None]
    fig.add_trace(go.Scatter(
        x=edge_x, y=edge_y, mode="lines",
        line=dict(color=_EDGE_COLOR, width=2),
        hoverinfo="skip", showlegend=False,
    ))

    for p in pulses:
        if p.from_node not in pos or p.to_node not in pos:
            continue
        (x0, y0), (x1, y1) = pos[p.from_node], pos[p.to_node]
        fig.add_trace(go.Scatter(
            x=[x0, x1], y=[y0, y1], mode="lines+markers",
            line=dict(color=_PULSE_COLOR, width=3, dash="dot"),
            marker=dict(size=[4, 12], color=_PULSE_COLOR),
            hovertemplate=f"{p.from_node} → {p.to_node}<extra>threat</extra>",
            showlegend=False,
        ))

    fig.add_trace(go.Scatter(
        x=[pos[n.id][0] for n in nodes],
        y=[pos[n.id][1] for n in nodes],
        mode="markers+text",
        text=[n.name for n in nodes],
        textposition="bottom center",
        marker=dict(
            size=34,
            color=[STATUS_COLORS.get(n.status, "#888") for n in nodes],
            line=dict(width=2, color="#0d1117"),
        ),
        customdata=[[n.type, n.status] for n in nodes],
        hovertemplate="%{text}<br>%{customdata[0]}: %{customdata[1]}<extra></extra>",
        showlegend=False,
    ))

    fig.update_layout(**_base(
        title=dict(text="Network Topology"),
        height=420,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False, scaleanchor="x"),
    ))
    return fig


# ── metrics ─────────────────────────────────────────────────────────────────


def metrics_line(df: pd.DataFrame) -> go.Figure:
    """Cumulative detected vs blocked plus response time on a second axis."""
    fig = go.Figure()
    if not df.empty:
        fig.add_trace(go.Scatter(
            x=df["timestamp"], y=df["threats_detected"], name="Detected",
            mode="lines", line=dict(color="#f97316", width=2),
        ))
        fig.add_trace(go.Scatter(
            x=df["timestamp"], y=df["threats_blocked"], name="Blocked",
            mode="lines", line=dict(color="#22c55e", width=2),
        ))
        fig.add_trace(go.Scatter(
            x=df["timestamp"], y=df["response_time_ms"], name="Response (ms)",
            mode="lines", line=dict(color="#a78bfa", width=1, dash="dot"), yaxis="y2",
        ))
    fig.update_layout(**_base(
        title=dict(text="Threat Metrics"),
        xaxis=dict(gridcolor=_GRID_COLOR),
        yaxis=dict(title="threats", gridcolor=_GRID_COLOR, rangemode="tozero"),
        yaxis2=dict(title="ms", overlaying="y", side="right", showgrid=False,
                    rangemode="tozero"),
    ))
    return fig


def severity_bar(counts: pd.DataFrame) -> go.Figure:
    fig = go.Figure(go.Bar(
        x=[s.capitalize() for s in counts["severity"]],
        y=counts["count"],
        marker_color=[SEVERITY_COLORS.get(s, "#888") for s in counts["severity"]],
        marker_line_width=0,
        hovertemplate="%{x}: %{y}<extra></extra>",
    ))
    fig.update_layout(**_base(
        title=dict(text="Events by Severity"),
        bargap=0.35,
        yaxis=dict(gridcolor=_GRID_COLOR, rangemode="tozero"),
    ))
    return fig
