"""Шар перетворення знімків рушія у DataFrame для дашборду."""

from __future__ import annotations

import logging
from dataclasses import asdict

import pandas as pd

from zerotrust.contracts.event import CSV_COLUMNS, SecurityEvent
from zerotrust.contracts.metrics import ThreatMetricSample
from zerotrust.contracts.network import NetworkNode

log = logging.getLogger(__name__)

SEVERITY_ORDER: dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}

METRIC_COLUMNS = [
    "timestamp",
    "threats_detected",
    "threats_blocked",
    "active_agents",
    "response_time_ms",
]

NODE_COLUMNS = ["id", "name", "type", "status", "x", "y", "connections"]


def _parse_ts(df: pd.DataFrame) -> pd.DataFrame:
    if "timestamp" in df.columns:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    return df


def events_frame(events: list[SecurityEvent]) -> pd.DataFrame:
    """Events as a DataFrame, newest first (input order is preserved)."""
    if not events:
        return pd.DataFrame(columns=CSV_COLUMNS)
    df = pd.DataFrame([ev.to_dict() for ev in events], columns=CSV_COLUMNS)
    return _parse_ts(df)


def metrics_frame(samples: list[ThreatMetricSample]) -> pd.DataFrame:
    """Metric samples oldest first, ready for a time-series chart."""
    if not samples:
        return pd.DataFrame(columns=METRIC_COLUMNS)
    df = pd.DataFrame([asdict(s) for s in samples], columns=METRIC_COLUMNS)
    df = _parse_ts(df)
    return df.sort_values("timestamp").reset_index(drop=True)


def nodes_frame(nodes: list[NetworkNode]) -> pd.DataFrame:
    return pd.DataFrame([asdict(n) for n in nodes], columns=NODE_COLUMNS)


def severity_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Events per severity, critical first; empty severities are kept at 0."""
    order = list(SEVERITY_ORDER)
    counts = (
        df["severity"].value_counts().reindex(order, fill_value=0)
        if not df.empty else pd.Series(0, index=order)
    )
    return counts.rename_axis("severity").reset_index(name="count")
