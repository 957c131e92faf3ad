"""Клієнт віддаленого API симуляцій атак.

``HttpSimulationAPI`` talks to the demo backend over ``httpx`` and raises
``RemoteError`` on anything but a clean ``success: true`` answer; the
controller decides what to do about it.  ``DemoSimulationAPI`` answers
in-process for runs without a backend.
"""

from __future__ import annotations

import logging
import random as _random_mod
import string
import time
from typing import Any, Protocol

import httpx

from zerotrust.simulator.errors import RemoteError, UnknownSimulationError

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TOKEN = "demo-admin-token"
DEFAULT_TIMEOUT_SEC = 8.0

# simulation id -> remote operation (POST /demo/simulate-<op>)
SIMULATION_ROUTES: dict[str, str] = {
    "credit_card_fraud": "fraud",
    "account_takeover": "takeover",
    "bot_attack": "bot",
    "api_abuse": "api-abuse",
    "data_exfiltration": "data-breach",
    "ddos_attack": "ddos",
}

DEMO_AFFECTED_SYSTEMS = [
    "E-commerce Frontend",
    "Payment Processing",
    "User Authentication",
    "Fraud Detection System",
]


def operation_for(simulation_id: str) -> str:
    """Remote operation name for *simulation_id*; unknown ids fail fast."""
    try:
        return SIMULATION_ROUTES[simulation_id]
    except KeyError:
        raise UnknownSimulationError(simulation_id) from None


class SimulationAPI(Protocol):
    """What the controller needs from a simulation backend."""

    def execute(self, simulation_id: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    def stop_all(self) -> dict[str, Any]: ...

    def status(self) -> list[dict[str, Any]]: ...

    def close(self) -> None: ...


class HttpSimulationAPI:
    """HTTP implementation with an explicit per-request timeout."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str = DEFAULT_TOKEN,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )
        log.info("Simulation API -> %s (timeout=%.1fs)", self.base_url, timeout)

    def __enter__(self) -> HttpSimulationAPI:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, json=body)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RemoteError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise RemoteError(f"{method} {path}: response is not JSON") from exc
        if not isinstance(data, dict):
            raise RemoteError(f"{method} {path}: unexpected response shape")
        return data

    def execute(self, simulation_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        path = f"/demo/simulate-{operation_for(simulation_id)}"
        data = self._request("POST", path, payload)
        if not data.get("success"):
            raise RemoteError(f"{path}: backend refused ({data.get('message', 'no message')})")
        if not data.get("simulation_id"):
            raise RemoteError(f"{path}: response has no simulation_id")
        return data

    def stop_all(self) -> dict[str, Any]:
        data = self._request("POST", "/demo/stop-simulations")
        if not data.get("success"):
            raise RemoteError(f"stop-simulations refused ({data.get('message', 'no message')})")
        return data

    def status(self) -> list[dict[str, Any]]:
        data = self._request("GET", "/demo/simulation-status")
        return list(data.get("active_simulations", []))


class DemoSimulationAPI:
    """Offline backend: every call succeeds with a mock answer."""

    def __init__(self, rng: _random_mod.Random | None = None) -> None:
        self.rng = rng or _random_mod.Random()
        self._active: list[dict[str, Any]] = []

    def execute(self, simulation_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        op = operation_for(simulation_id)
        suffix = "".join(self.rng.choice(string.ascii_lowercase + string.digits) for _ in range(9))
        sim_id = f"sim_{int(time.time() * 1000)}_{suffix}"
        self._active = [{
            "id": sim_id,
            "type": simulation_id,
            "started_at": payload.get("timestamp", ""),
            "status": "running",
        }]
        return {
            "success": True,
            "simulation_id": sim_id,
            "message": f"{op} simulation started successfully (demo mode)",
            "estimated_duration": 300,
            "affected_systems": list(DEMO_AFFECTED_SYSTEMS),
        }

    def stop_all(self) -> dict[str, Any]:
        self._active = []
        return {"success": True, "message": "All simulations stopped successfully (demo mode)"}

    def status(self) -> list[dict[str, Any]]:
        return list(self._active)

    def close(self) -> None:
        self._active = []


def build_api(cfg: dict[str, Any], offline: bool = False) -> SimulationAPI:
    """Create the backend client described by the ``remote`` config section."""
    remote = cfg.get("remote", {})
    if offline or remote.get("offline", False):
        log.info("Simulation API: offline demo backend")
        return DemoSimulationAPI()
    return HttpSimulationAPI(
        base_url=str(remote.get("base_url", DEFAULT_BASE_URL)),
        token=str(remote.get("token", DEFAULT_TOKEN)),
        timeout=float(remote.get("timeout_sec", DEFAULT_TIMEOUT_SEC)),
    )
