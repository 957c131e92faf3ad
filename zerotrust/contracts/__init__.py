"""Simulation contracts — data structures shared by engine, CLI and dashboard."""

from zerotrust.contracts.alert import LiveAlert
from zerotrust.contracts.enums import (
    ControllerState,
    EventStatus,
    Intensity,
    NodeStatus,
    NodeType,
    Severity,
    SystemStatus,
)
from zerotrust.contracts.event import SecurityEvent
from zerotrust.contracts.metrics import (
    KpiMetric,
    SystemMetrics,
    ThreatMapStats,
    ThreatMetricSample,
)
from zerotrust.contracts.network import NetworkNode, ThreatPulse
from zerotrust.contracts.simulation import AttackSimulation, SimulationRun

__all__ = [
    "AttackSimulation",
    "ControllerState",
    "EventStatus",
    "Intensity",
    "KpiMetric",
    "LiveAlert",
    "NetworkNode",
    "NodeStatus",
    "NodeType",
    "SecurityEvent",
    "Severity",
    "SimulationRun",
    "SystemMetrics",
    "SystemStatus",
    "ThreatMapStats",
    "ThreatMetricSample",
    "ThreatPulse",
]
