"""Відображення таблиць подій."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

# columns to display (in order)
_DISPLAY_COLS = [
    "timestamp",
    "severity",
    "attack_type",
    "target",
    "agent",
    "action",
    "status",
    "description",
    "source_ip",
    "location",
    "user",
]

_COL_LABELS = {
    "timestamp": "Time",
    "severity": "Severity",
    "attack_type": "Type",
    "target": "Target",
    "agent": "Agent",
    "action": "Action",
    "status": "Status",
    "description": "Description",
    "source_ip": "Source IP",
    "location": "Location",
    "user": "User",
}

_COL_CONFIG = {
    "Time": colcfg.DatetimeColumn("Time", format="HH:mm:ss"),
}


def render_event_table(df: pd.DataFrame, key: str, empty_msg: str = "No events yet.") -> None:
    """Render an event log, newest first, dropping columns that are all empty."""
    if df.empty:
        st.info(empty_msg)
        return

    cols = [c for c in _DISPLAY_COLS if c in df.columns]
    view = df[cols].copy()
    blank = [c for c in ("agent", "source_ip", "location", "user")
             if c in view.columns and (view[c] == "").all()]
    view = view.drop(columns=blank).rename(columns=_COL_LABELS)

    st.caption(f"Showing {len(view)} events")
    st.dataframe(
        view,
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 600),
        column_config=_COL_CONFIG,
        key=key,
    )
