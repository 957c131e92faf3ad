"""Tests for zerotrust.remote.client — HTTP and demo backends."""

from __future__ import annotations

import json
import re

import httpx
import pytest

from tests.conftest import START
from zerotrust.remote.client import (
    SIMULATION_ROUTES,
    DemoSimulationAPI,
    HttpSimulationAPI,
    build_api,
    operation_for,
)
from zerotrust.simulator.catalog import build_catalog
from zerotrust.simulator.controller import SimulationController
from zerotrust.simulator.errors import RemoteError, UnknownSimulationError


def _api(handler, **kw) -> HttpSimulationAPI:
    return HttpSimulationAPI("http://backend.test/", "tok-1", transport=httpx.MockTransport(handler),
                             **kw)


class TestRoutes:
    def test_every_default_simulation_has_a_route(self):
        assert set(build_catalog({})) == set(SIMULATION_ROUTES)

    def test_unknown(self):
        with pytest.raises(UnknownSimulationError):
            operation_for("ransomware")


class TestHttpSimulationAPI:
    def test_execute_posts_to_operation(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "simulation_id": "sim-9",
                                             "estimated_duration": 120})

        with _api(handler) as api:
            result = api.execute("data_exfiltration", {"intensity": "low"})
        assert result["simulation_id"] == "sim-9"
        assert seen == {
            "method": "POST",
            "path": "/demo/simulate-data-breach",
            "auth": "Bearer tok-1",
            "body": {"intensity": "low"},
        }

    def test_refusal_raises(self):
        api = _api(lambda r: httpx.Response(200, json={"success": False, "message": "nope"}))
        with pytest.raises(RemoteError, match="nope"):
            api.execute("ddos_attack", {})

    def test_missing_id_raises(self):
        api = _api(lambda r: httpx.Response(200, json={"success": True}))
        with pytest.raises(RemoteError):
            api.execute("ddos_attack", {})

    def test_http_error_raises(self):
        api = _api(lambda r: httpx.Response(503, json={"detail": "down"}))
        with pytest.raises(RemoteError):
            api.execute("bot_attack", {})

    def test_timeout_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RemoteError):
            _api(handler).stop_all()

    def test_non_json_raises(self):
        api = _api(lambda r: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(RemoteError):
            api.status()

    def test_unknown_simulation_never_hits_network(self):
        calls = []
        api = _api(lambda r: calls.append(r) or httpx.Response(200, json={}))
        with pytest.raises(UnknownSimulationError):
            api.execute("ransomware", {})
        assert calls == []

    def test_stop_and_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/demo/stop-simulations":
                assert request.method == "POST"
                return httpx.Response(200, json={"success": True, "message": "stopped"})
            assert request.url.path == "/demo/simulation-status"
            return httpx.Response(200, json={"success": True, "active_simulations": [
                {"id": "sim-1", "type": "ddos_attack", "status": "running"}]})

        api = _api(handler)
        assert api.stop_all()["message"] == "stopped"
        assert api.status()[0]["id"] == "sim-1"

    def test_controller_falls_back_when_backend_errors(self):
        api = _api(lambda r: httpx.Response(500))
        ctl = SimulationController(api, build_catalog({}), lambda: START)
        run = ctl.start("ddos_attack")
        assert run.demo_mode
        ctl.stop()
        assert ctl.run is None


class TestDemoSimulationAPI:
    def test_execute_mock_answer(self, rng):
        api = DemoSimulationAPI(rng)
        result = api.execute("bot_attack", {"timestamp": "t0"})
        assert result["success"] is True
        assert re.fullmatch(r"sim_\d+_[a-z0-9]{9}", result["simulation_id"])
        assert result["estimated_duration"] == 300
        assert len(result["affected_systems"]) == 4
        assert api.status()[0]["type"] == "bot_attack"

    def test_stop_clears_status(self, rng):
        api = DemoSimulationAPI(rng)
        api.execute("ddos_attack", {})
        assert api.stop_all()["success"] is True
        assert api.status() == []

    def test_close_clears_status(self, rng):
        api = DemoSimulationAPI(rng)
        api.execute("ddos_attack", {})
        api.close()
        assert api.status() == []

    def test_unknown(self, rng):
        with pytest.raises(UnknownSimulationError):
            DemoSimulationAPI(rng).execute("ransomware", {})


class TestBuildApi:
    def test_offline_flag(self):
        assert isinstance(build_api({}, offline=True), DemoSimulationAPI)

    def test_offline_config(self):
        assert isinstance(build_api({"remote": {"offline": True}}), DemoSimulationAPI)

    def test_http_from_config(self):
        api = build_api({"remote": {"base_url": "http://x.test/", "timeout_sec": 2}})
        assert isinstance(api, HttpSimulationAPI)
        assert api.base_url == "http://x.test"
        api.close()
