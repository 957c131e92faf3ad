"""Фонові стрічки подій: real-time monitoring та threat map."""

from __future__ import annotations

import logging
import random as _random_mod
from collections.abc import Callable
from datetime import datetime

from zerotrust.contracts.event import SecurityEvent
from zerotrust.contracts.metrics import ThreatMapStats
from zerotrust.simulator.bounded import BoundedLog
from zerotrust.simulator.events import (
    _now,
    _ts,
    generate_monitoring_event,
    generate_threat,
)

log = logging.getLogger(__name__)

MONITORING_CAPACITY = 10
MONITORING_JITTER_SEC = (2.0, 5.0)
THREAT_MAP_CAPACITY = 20
THREAT_MAP_PERIOD_SEC = 3.0
THREAT_MAP_CHANCE = 0.4
THREAT_MAP_INITIAL = 5


class MonitoringFeed:
    """Generic live feed; runs whether or not a simulation is active."""

    def __init__(
        self,
        rng: _random_mod.Random,
        clock: Callable[[], datetime] = _now,
        capacity: int = MONITORING_CAPACITY,
        jitter: tuple[float, float] = MONITORING_JITTER_SEC,
    ) -> None:
        self.rng = rng
        self.clock = clock
        self.jitter = jitter
        self.events: BoundedLog[SecurityEvent] = BoundedLog(capacity)

    def next_delay(self) -> float:
        """Delay until the next entry, uniform in the jitter window."""
        lo, hi = self.jitter
        return lo + self.rng.random() * (hi - lo)

    def tick(self, simulation_active: bool) -> SecurityEvent:
        ev = generate_monitoring_event(simulation_active, self.rng, self.clock())
        self.events.push(ev)
        return ev


class ThreatMapFeed:
    """Threat-map stream: a 40 % chance of a new threat every period."""

    def __init__(
        self,
        rng: _random_mod.Random,
        clock: Callable[[], datetime] = _now,
        capacity: int = THREAT_MAP_CAPACITY,
        chance: float = THREAT_MAP_CHANCE,
    ) -> None:
        self.rng = rng
        self.clock = clock
        self.chance = chance
        self.threats: BoundedLog[SecurityEvent] = BoundedLog(capacity)
        self.stats = ThreatMapStats()
        self.live = True

    def seed(self, count: int = THREAT_MAP_INITIAL) -> None:
        """Fill the map with *count* initial threats (not counted in stats)."""
        now = self.clock()
        self.threats.extend([generate_threat(self.rng, now) for _ in range(count)])
        self.stats.last_update = _ts(now)

    def tick(self) -> SecurityEvent | None:
        if not self.live or self.rng.random() <= 1.0 - self.chance:
            return None
        threat = generate_threat(self.rng, self.clock())
        self.threats.push(threat)

        blocked = threat.status == "blocked"
        self.stats.total_threats += 1
        self.stats.blocked += int(blocked)
        self.stats.active_incidents += int(not blocked)
        self.stats.last_update = threat.timestamp
        if threat.severity == "critical":
            log.info("threat map: critical %s from %s", threat.attack_type, threat.source_ip)
        return threat
