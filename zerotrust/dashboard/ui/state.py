"""Ініціалізація стану сесії та рушія симуляції."""

from __future__ import annotations

import logging
import os

import streamlit as st

from zerotrust.remote.client import build_api
from zerotrust.shared.config_loader import load_config
from zerotrust.shared.seed import init_seed
from zerotrust.simulator.engine import SimulationEngine

log = logging.getLogger(__name__)

# Offline demo backend unless explicitly pointed at a server.
_OFFLINE = os.environ.get("ZEROTRUST_OFFLINE", "1") == "1"

_DEFAULTS: dict[str, object] = {
    "selected_simulation": None,
    "intensity": "medium",
    "auto_refresh": True,
    "refresh_interval": 1.5,
}


def init_state() -> None:
    """Заповнює st.session_state значеннями за замовчуванням."""
    for key, value in _DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value


def get_engine() -> SimulationEngine:
    """One engine per browser session, feeds started on first use."""
    engine = st.session_state.get("engine")
    if engine is None:
        cfg = load_config()
        engine = SimulationEngine(cfg=cfg, api=build_api(cfg, offline=_OFFLINE), rng=init_seed())
        engine.start_feeds()
        engine.catch_up()
        st.session_state["engine"] = engine
        st.session_state["gate_cfg"] = cfg.get("gate", {})
        log.info("Dashboard engine created (offline=%s)", _OFFLINE)
    return engine
