"""Canonical enumerations for the simulation contracts."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EventStatus(str, Enum):
    DETECTED = "detected"
    BLOCKED = "blocked"
    MITIGATED = "mitigated"
    INVESTIGATING = "investigating"


class NodeType(str, Enum):
    GATEWAY = "gateway"
    FIREWALL = "firewall"
    SERVER = "server"
    DATABASE = "database"
    ENDPOINT = "endpoint"


class NodeStatus(str, Enum):
    SECURE = "secure"
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class Intensity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ControllerState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class SystemStatus(str, Enum):
    SECURE = "secure"
    WARNING = "warning"
    ALERT = "alert"
