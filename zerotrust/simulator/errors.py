"""Exception hierarchy for the simulation core."""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class SimulationValidationError(SimulationError):
    """Bad caller input: no simulation selected, unknown intensity …"""


class UnknownSimulationError(SimulationError):
    """The simulation id has no catalog entry or no remote operation."""

    def __init__(self, simulation_id: str) -> None:
        super().__init__(f"Unknown simulation type: {simulation_id}")
        self.simulation_id = simulation_id


class SimulationAlreadyRunningError(SimulationError):
    """start() was called while another run is active."""


class ControllerBusyError(SimulationError):
    """start()/stop() was called while a previous call is still in flight."""


class RemoteError(SimulationError):
    """The simulation backend failed, timed out or answered ``success: false``."""
