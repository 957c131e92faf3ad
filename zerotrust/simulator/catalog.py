"""Attack catalog and topology builders (defaults + simulation.yaml)."""

from __future__ import annotations

import logging
from typing import Any

from zerotrust.contracts.enums import NodeType, Severity
from zerotrust.contracts.network import NetworkNode, default_status
from zerotrust.contracts.simulation import AttackSimulation

log = logging.getLogger(__name__)

DEFAULT_SIMULATIONS: list[dict[str, Any]] = [
    {
        "id": "credit_card_fraud",
        "name": "Credit Card Fraud",
        "description": "Simulate suspicious payment transactions with unusual patterns",
        "severity": "high",
        "endpoint": "/demo/simulate-fraud",
        "payload": {"attack_type": "credit_card_fraud", "intensity": "high"},
    },
    {
        "id": "account_takeover",
        "name": "Account Takeover",
        "description": "Simulate credential stuffing and brute force login attempts",
        "severity": "critical",
        "endpoint": "/demo/simulate-takeover",
        "payload": {"attack_type": "credential_stuffing", "target_accounts": 100},
    },
    {
        "id": "bot_attack",
        "name": "Bot Scraping Attack",
        "description": "Simulate automated scraping and content harvesting bots",
        "severity": "medium",
        "endpoint": "/demo/simulate-bot",
        "payload": {"attack_type": "scraping", "requests_per_second": 1000},
    },
    {
        "id": "api_abuse",
        "name": "API Rate Limit Abuse",
        "description": "Simulate API flooding and rate limit bypass attempts",
        "severity": "high",
        "endpoint": "/demo/simulate-api-abuse",
        "payload": {"attack_type": "rate_limit_bypass", "requests_per_minute": 5000},
    },
    {
        "id": "data_exfiltration",
        "name": "Data Exfiltration",
        "description": "Simulate unauthorized access to sensitive customer data",
        "severity": "critical",
        "endpoint": "/demo/simulate-data-breach",
        "payload": {"attack_type": "data_exfiltration", "data_type": "customer_pii"},
    },
    {
        "id": "ddos_attack",
        "name": "DDoS Simulation",
        "description": "Simulate distributed denial of service attack patterns",
        "severity": "critical",
        "endpoint": "/demo/simulate-ddos",
        "payload": {"attack_type": "volumetric_ddos", "intensity": "high"},
    },
]

DEFAULT_TOPOLOGY: list[dict[str, Any]] = [
    {"id": "gateway", "name": "Security Gateway", "type": "gateway",
     "x": 50, "y": 200, "connections": ["firewall", "endpoint1"]},
    {"id": "firewall", "name": "Main Firewall", "type": "firewall",
     "x": 200, "y": 100, "connections": ["server1", "server2"]},
    {"id": "server1", "name": "Web Server", "type": "server",
     "x": 400, "y": 80, "connections": ["database"]},
    {"id": "server2", "name": "API Server", "type": "server",
     "x": 400, "y": 150, "connections": ["database"]},
    {"id": "database", "name": "Customer DB", "type": "database",
     "x": 600, "y": 120, "connections": []},
    {"id": "endpoint1", "name": "User Device", "type": "endpoint",
     "x": 200, "y": 300, "connections": ["server1"]},
]

_SEVERITIES = {s.value for s in Severity}
_NODE_TYPES = {t.value for t in NodeType}


def build_catalog(cfg: dict[str, Any]) -> dict[str, AttackSimulation]:
    """Parse the ``simulations`` section and return entries keyed by id.

    Falls back to the built-in six scenarios when the section is absent.
    """
    raw = cfg.get("simulations") or DEFAULT_SIMULATIONS
    catalog: dict[str, AttackSimulation] = {}
    for entry in raw:
        severity = str(entry.get("severity", "medium"))
        if severity not in _SEVERITIES:
            raise ValueError(f"simulation {entry.get('id')!r}: bad severity {severity!r}")
        sim = AttackSimulation(
            id=entry["id"],
            name=entry.get("name", entry["id"]),
            description=entry.get("description", ""),
            severity=severity,
            endpoint=entry.get("endpoint", ""),
            payload=dict(entry.get("payload", {})),
        )
        catalog[sim.id] = sim
    log.info("Attack catalog built: %d simulations", len(catalog))
    return catalog


def build_topology(cfg: dict[str, Any]) -> list[NetworkNode]:
    """Parse the ``topology`` section into nodes in their resting state."""
    raw = cfg.get("topology") or DEFAULT_TOPOLOGY
    nodes: list[NetworkNode] = []
    seen: set[str] = set()
    for entry in raw:
        node_type = entry["type"]
        if node_type not in _NODE_TYPES:
            raise ValueError(f"node {entry['id']!r}: unknown type {node_type!r}")
        if entry["id"] in seen:
            raise ValueError(f"duplicate node id {entry['id']!r}")
        seen.add(entry["id"])
        nodes.append(NetworkNode(
            id=entry["id"],
            name=entry.get("name", entry["id"]),
            type=node_type,
            status=default_status(node_type),
            x=int(entry.get("x", 0)),
            y=int(entry.get("y", 0)),
            connections=list(entry.get("connections", [])),
        ))
    for node in nodes:
        dangling = [c for c in node.connections if c not in seen]
        if dangling:
            log.warning("Node %s links to unknown nodes: %s", node.id, ", ".join(dangling))
    log.info("Topology built: %d nodes", len(nodes))
    return nodes
