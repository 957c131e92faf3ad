"""Attack simulation catalog entries and the live run record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AttackSimulation:
    """A catalog entry describing one fake attack scenario."""

    id: str                 # e.g. "ddos_attack"
    name: str
    description: str
    severity: str           # low | medium | high | critical
    endpoint: str           # logical remote operation, e.g. "/demo/simulate-ddos"
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SimulationRun:
    """The currently active simulation.

    ``simulation_id`` is either issued by the backend or minted locally as
    ``demo_<ms>`` when the backend could not be reached (``demo_mode``).
    """

    simulation: AttackSimulation
    simulation_id: str
    intensity: str
    started_at: str
    payload: dict[str, Any] = field(default_factory=dict)
    demo_mode: bool = False
    estimated_duration: int | None = None

    @property
    def attack_type(self) -> str:
        return self.simulation.id
