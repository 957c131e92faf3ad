"""Network topology model: nodes and transient threat pulses."""

from __future__ import annotations

from dataclasses import dataclass, field

from zerotrust.contracts.enums import NodeStatus, NodeType

# Node types that rest in "secure"; everything else rests in "normal".
SECURE_BY_DEFAULT: frozenset[str] = frozenset(
    {NodeType.GATEWAY.value, NodeType.FIREWALL.value, NodeType.DATABASE.value}
)


def default_status(node_type: str) -> str:
    """Status a node of *node_type* has when no simulation is active."""
    if node_type in SECURE_BY_DEFAULT:
        return NodeStatus.SECURE.value
    return NodeStatus.NORMAL.value


@dataclass(slots=True)
class NetworkNode:
    """One element of the demo topology.  Only ``status`` ever changes."""

    id: str
    name: str
    type: str               # gateway | firewall | server | database | endpoint
    status: str             # secure | normal | warning | critical
    x: int = 0              # layout only
    y: int = 0
    connections: list[str] = field(default_factory=list)

    @property
    def default_status(self) -> str:
        return default_status(self.type)


@dataclass(frozen=True, slots=True)
class ThreatPulse:
    """A threat travelling along the topology; expires after a fixed delay."""

    id: str
    from_node: str
    to_node: str
