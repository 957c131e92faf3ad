"""Білдери HTML KPI карток."""

from __future__ import annotations

# ── canonical status / severity colours ─────────────────────────────────────

STATUS_COLORS: dict[str, str] = {
    "secure": "#22c55e",
    "normal": "#3b82f6",
    "warning": "#f59e0b",
    "critical": "#ef4444",
}

SEVERITY_COLORS: dict[str, str] = {
    "low": "#3b82f6",
    "medium": "#f59e0b",
    "high": "#f97316",
    "critical": "#ef4444",
}

SYSTEM_STATUS_DISPLAY: dict[str, tuple[str, str]] = {
    "secure": ("Secure", "card-accent-secure"),
    "warning": ("Warning", "card-accent-warning"),
    "alert": ("Alert", "card-accent-alert"),
}


def kpi_card(title: str, value: str, caption: str = "", accent_cls: str = "") -> str:
    """Побудова однієї KPI картки."""
    return (
        f'<div class="kpi-card {accent_cls}">'
        f'  <div class="kpi-card-header">{title}</div>'
        f'  <div class="kpi-card-body">'
        f'    <div class="kpi-metric-main">{value}</div>'
        f'    <div class="kpi-metric-label">{caption}</div>'
        f"  </div>"
        f"</div>"
    )


def system_status_card(status: str) -> str:
    label, accent = SYSTEM_STATUS_DISPLAY.get(status, (status.capitalize(), ""))
    return kpi_card("Security Status", label, "Live channel", accent)
