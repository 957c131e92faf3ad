"""Simulation controller: idle -> starting -> running -> stopping -> idle.

The controller never gets stuck because of the backend.  A failed
``execute`` call still starts the run, with a locally minted
``demo_<ms>`` id, and a failed ``stop`` still stops it.  Only caller
mistakes (nothing selected, unknown id, already running, call in
flight) raise.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

from zerotrust.contracts.enums import ControllerState, Intensity
from zerotrust.contracts.simulation import AttackSimulation, SimulationRun
from zerotrust.remote.client import SimulationAPI, operation_for
from zerotrust.simulator.errors import (
    ControllerBusyError,
    SimulationAlreadyRunningError,
    SimulationValidationError,
    UnknownSimulationError,
)
from zerotrust.simulator.events import _now, _ts

log = logging.getLogger(__name__)

StartListener = Callable[[SimulationRun], None]
StopListener = Callable[[SimulationRun | None], None]

_INTENSITIES = {i.value for i in Intensity}


class SimulationController:
    """Owns the single active ``SimulationRun`` and the start/stop protocol."""

    def __init__(
        self,
        api: SimulationAPI,
        catalog: dict[str, AttackSimulation],
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self.api = api
        self.catalog = catalog
        self.clock = clock
        self.state: ControllerState = ControllerState.IDLE
        self.run: SimulationRun | None = None
        self._busy = threading.Lock()
        self._on_start: list[StartListener] = []
        self._on_stop: list[StopListener] = []

    # ── observers ────────────────────────────────────────────────────────

    def on_start(self, listener: StartListener) -> None:
        self._on_start.append(listener)

    def on_stop(self, listener: StopListener) -> None:
        self._on_stop.append(listener)

    @property
    def is_running(self) -> bool:
        return self.state is ControllerState.RUNNING

    # ── protocol ─────────────────────────────────────────────────────────

    def build_payload(
        self, simulation: AttackSimulation, intensity: str, now: datetime
    ) -> dict[str, Any]:
        """Request body for the execute call.

        Catalog payload fields are applied last, so an entry that pins its
        own ``intensity`` (fraud, DDoS) overrides the operator's choice.
        """
        return {
            "attack_type": simulation.payload.get("attack_type", simulation.id),
            "intensity": intensity,
            "timestamp": _ts(now),
            "admin_initiated": True,
            **simulation.payload,
        }

    def start(self, simulation_id: str | None, intensity: str = "medium") -> SimulationRun:
        """Start *simulation_id*; returns the new run (real or demo-mode)."""
        if not simulation_id:
            raise SimulationValidationError("Please select an attack simulation first")
        if intensity not in _INTENSITIES:
            raise SimulationValidationError(
                f"intensity must be one of {sorted(_INTENSITIES)}, got {intensity!r}"
            )
        if not self._busy.acquire(blocking=False):
            raise ControllerBusyError(f"cannot start while {self.state.value}")
        try:
            if self.run is not None:
                raise SimulationAlreadyRunningError(
                    f"simulation {self.run.simulation_id} is already running"
                )
            simulation = self.catalog.get(simulation_id)
            if simulation is None:
                raise UnknownSimulationError(simulation_id)
            operation_for(simulation_id)

            self.state = ControllerState.STARTING
            now = self.clock()
            payload = self.build_payload(simulation, intensity, now)
            try:
                run = self._execute(simulation, payload, now)
            except UnknownSimulationError:
                self.state = ControllerState.IDLE
                raise

            self.run = run
            self.state = ControllerState.RUNNING
        finally:
            self._busy.release()

        log.info(
            "Simulation %s started: id=%s intensity=%s%s",
            simulation.id, run.simulation_id, run.intensity,
            " (demo mode)" if run.demo_mode else "",
        )
        for listener in self._on_start:
            listener(run)
        return run

    def _execute(
        self, simulation: AttackSimulation, payload: dict[str, Any], now: datetime
    ) -> SimulationRun:
        try:
            result = self.api.execute(simulation.id, payload)
            if not result.get("success") or not result.get("simulation_id"):
                raise ValueError(f"backend answered {result!r}")
        except UnknownSimulationError:
            raise
        except Exception as exc:
            log.warning("Failed to start %s remotely, running in demo mode: %s",
                        simulation.id, exc)
            return SimulationRun(
                simulation=simulation,
                simulation_id=f"demo_{int(now.timestamp() * 1000)}",
                intensity=str(payload.get("intensity", "medium")),
                started_at=_ts(now),
                payload=payload,
                demo_mode=True,
            )
        return SimulationRun(
            simulation=simulation,
            simulation_id=str(result["simulation_id"]),
            intensity=str(payload.get("intensity", "medium")),
            started_at=_ts(now),
            payload=payload,
            estimated_duration=result.get("estimated_duration"),
        )

    def stop(self) -> SimulationRun | None:
        """Stop whatever is running; returns the run that was stopped.

        Stopping while idle does nothing but still notifies listeners, so
        views always observe a "stopped" signal.
        """
        if not self._busy.acquire(blocking=False):
            raise ControllerBusyError(f"cannot stop while {self.state.value}")
        try:
            previous = self.run
            if previous is not None:
                self.state = ControllerState.STOPPING
                try:
                    self.api.stop_all()
                except Exception as exc:
                    log.warning("Remote stop failed, stopping locally: %s", exc)
            self.run = None
            self.state = ControllerState.IDLE
        finally:
            self._busy.release()

        if previous is not None:
            log.info("Simulation %s stopped", previous.simulation_id)
        for listener in self._on_stop:
            listener(previous)
        return previous

    def remote_status(self) -> list[dict[str, Any]]:
        """Active simulations according to the backend; [] if unreachable."""
        try:
            return self.api.status()
        except Exception as exc:
            log.warning("Failed to get simulation status: %s", exc)
            return []
