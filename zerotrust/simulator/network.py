"""Network state machine: node status per tick + threat pulses."""

from __future__ import annotations

import logging
import random as _random_mod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from zerotrust.contracts.enums import NodeStatus
from zerotrust.contracts.event import SecurityEvent
from zerotrust.contracts.network import NetworkNode, ThreatPulse
from zerotrust.simulator.bounded import BoundedLog
from zerotrust.simulator.events import _bucket, _event_id, _now, _pick, generate_event
from zerotrust.simulator.scheduler import Scheduler, Task

log = logging.getLogger(__name__)

PULSE_TTL_SEC = 2.0
PULSE_CHANCE = 0.3
MAX_PULSES = 20

_ALERTING = frozenset({NodeStatus.WARNING.value, NodeStatus.CRITICAL.value})


@dataclass(frozen=True, slots=True)
class Transition:
    """How one simulation type moves the nodes it targets."""

    node_types: frozenset[str]
    thresholds: list[tuple[float, str]]
    fallback: str


# simulation id -> transition; other simulations leave every node untouched
TRANSITIONS: dict[str, Transition] = {
    "ddos_attack": Transition(
        frozenset({"gateway", "firewall"}),
        [(0.7, NodeStatus.CRITICAL.value), (0.4, NodeStatus.WARNING.value)],
        NodeStatus.SECURE.value,
    ),
    "data_exfiltration": Transition(
        frozenset({"database"}),
        [(0.8, NodeStatus.CRITICAL.value), (0.5, NodeStatus.WARNING.value)],
        NodeStatus.SECURE.value,
    ),
    "account_takeover": Transition(
        frozenset({"endpoint"}),
        [(0.6, NodeStatus.WARNING.value)],
        NodeStatus.NORMAL.value,
    ),
}


def next_status(node: NetworkNode, simulation_type: str, r: float) -> str:
    """Candidate status of *node* for draw *r* under *simulation_type*."""
    rule = TRANSITIONS.get(simulation_type)
    if rule is None or node.type not in rule.node_types:
        return node.status
    return _bucket(r, rule.thresholds, rule.fallback)


class NetworkStateMachine:
    """Owns the fixed topology; only node status and the pulse set mutate."""

    def __init__(
        self,
        nodes: list[NetworkNode],
        rng: _random_mod.Random,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = _now,
        pulse_ttl: float = PULSE_TTL_SEC,
        pulse_chance: float = PULSE_CHANCE,
        max_pulses: int = MAX_PULSES,
    ) -> None:
        if len(nodes) < 2:
            raise ValueError("topology needs at least two nodes")
        self.nodes = nodes
        self.rng = rng
        self.scheduler = scheduler
        self.clock = clock
        self.pulse_ttl = pulse_ttl
        self.pulse_chance = pulse_chance
        self._pulses: BoundedLog[ThreatPulse] = BoundedLog(max_pulses)
        self._expiry: dict[str, Task] = {}

    # ── views ────────────────────────────────────────────────────────────

    @property
    def pulses(self) -> list[ThreatPulse]:
        return self._pulses.items()

    def node(self, node_id: str) -> NetworkNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def statuses(self) -> dict[str, str]:
        return {n.id: n.status for n in self.nodes}

    # ── transitions ──────────────────────────────────────────────────────

    def tick(self, simulation_type: str | None) -> list[SecurityEvent]:
        """Advance every node one step; return events for new alerts.

        With no active simulation the topology is reset instead.
        """
        if simulation_type is None:
            self.reset()
            return []

        now = self.clock()
        events: list[SecurityEvent] = []
        for node in self.nodes:
            r = self.rng.random()
            new_status = next_status(node, simulation_type, r)
            if new_status != node.status and new_status in _ALERTING:
                ev = generate_event(simulation_type, node.id, self.rng, now)
                events.append(ev)
                log.info("%s -> %s (%s, %s)", node.id, new_status, ev.severity, ev.action)
            node.status = new_status

        self._maybe_pulse()
        return events

    def reset(self) -> None:
        """Return every node to its resting status and drop all pulses."""
        for node in self.nodes:
            node.status = node.default_status
        for task in self._expiry.values():
            self.scheduler.cancel(task)
        self._expiry.clear()
        self._pulses.clear()

    # ── pulses ───────────────────────────────────────────────────────────

    def _maybe_pulse(self) -> ThreatPulse | None:
        if self.rng.random() <= 1.0 - self.pulse_chance:
            return None
        source = _pick(self.rng, self.nodes)
        target = _pick(self.rng, [n for n in self.nodes if n.id != source.id])
        pulse = ThreatPulse(
            id=_event_id("pulse", self.rng, self.clock()),
            from_node=source.id,
            to_node=target.id,
        )
        self._pulses.push(pulse)
        self._drop_evicted()
        self._expiry[pulse.id] = self.scheduler.call_later(
            self.pulse_ttl, lambda: self._expire(pulse.id), name=f"expire:{pulse.id}"
        )
        log.debug("pulse %s: %s -> %s", pulse.id, source.id, target.id)
        return pulse

    def _drop_evicted(self) -> None:
        """Cancel expiry timers of pulses that fell off the capped set."""
        live = {p.id for p in self._pulses}
        for pid in [pid for pid in self._expiry if pid not in live]:
            self.scheduler.cancel(self._expiry.pop(pid))

    def _expire(self, pulse_id: str) -> None:
        self._expiry.pop(pulse_id, None)
        self._pulses.remove_where(lambda p: p.id == pulse_id)
