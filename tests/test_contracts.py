"""Tests for zerotrust.contracts — data classes and serialisation."""

from __future__ import annotations

import dataclasses
import json

import pytest

from tests.conftest import make_event
from zerotrust.contracts import NetworkNode, Severity, SimulationRun
from zerotrust.contracts.event import CSV_COLUMNS, SecurityEvent
from zerotrust.contracts.network import default_status
from zerotrust.simulator.catalog import build_catalog


class TestSecurityEvent:
    def test_csv_header(self):
        assert SecurityEvent.csv_header() == ",".join(CSV_COLUMNS)
        assert CSV_COLUMNS[:3] == ["id", "timestamp", "attack_type"]

    def test_csv_row_quotes_commas(self):
        row = make_event(description="Flood, then scan").to_csv_row()
        assert '"Flood, then scan"' in row
        assert not row.endswith("\n")

    def test_json_compact(self):
        ev = make_event(location="São Paulo, BR")
        text = ev.to_json()
        assert '": ' not in text
        assert '", "' not in text
        assert "São Paulo" in text
        assert json.loads(text)["location"] == "São Paulo, BR"

    def test_frozen(self):
        ev = make_event()
        with pytest.raises(dataclasses.FrozenInstanceError):
            ev.severity = "low"  # type: ignore[misc]

    def test_to_dict_has_all_columns(self):
        assert list(make_event().to_dict()) == CSV_COLUMNS + ["details"]


class TestNetworkContracts:
    @pytest.mark.parametrize("type_,expected", [
        ("gateway", "secure"), ("firewall", "secure"), ("database", "secure"),
        ("server", "normal"), ("endpoint", "normal"),
    ])
    def test_default_status(self, type_, expected):
        assert default_status(type_) == expected
        assert NetworkNode("n", "N", type_, "critical").default_status == expected


class TestSimulationRun:
    def test_attack_type_is_catalog_id(self):
        sim = build_catalog({})["account_takeover"]
        run = SimulationRun(sim, "srv-1", "medium", "2026-02-26T10:00:00.000Z")
        assert run.attack_type == "account_takeover"
        assert run.demo_mode is False

    def test_severity_enum_values(self):
        assert [s.value for s in Severity] == ["low", "medium", "high", "critical"]
