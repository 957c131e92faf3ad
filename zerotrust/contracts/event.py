"""SecurityEvent data-class — one synthesised incident record."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict, dataclass, field
from typing import Any

# CSV column order for exported event logs
CSV_COLUMNS: list[str] = [
    "id",
    "timestamp",
    "attack_type",
    "target",
    "severity",
    "agent",
    "action",
    "status",
    "description",
    "source_ip",
    "location",
    "user",
]


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """A detected / blocked / mitigated incident produced by the generator."""

    # ── mandatory ──
    id: str                 # "event_<ms>_<rand>"
    timestamp: str          # ISO-8601 UTC  e.g. "2026-02-26T10:00:00.000Z"
    attack_type: str        # ddos_attack | account_takeover | fraud | ...
    target: str             # node id or logical target
    severity: str           # low | medium | high | critical
    agent: str              # one of AGENT_ROSTER
    action: str             # remediation action
    status: str             # detected | blocked | mitigated | investigating
    description: str

    # ── optional ──
    source_ip: str = ""
    location: str = ""
    user: str = ""
    details: dict[str, Any] = field(default_factory=dict, hash=False)  # threat-map only, not in CSV

    # ── serialisation ─────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_csv_row(self) -> str:
        """Return a single CSV line (no trailing newline)."""
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow([getattr(self, c) for c in CSV_COLUMNS])
        return buf.getvalue().rstrip("\r\n")

    def to_json(self) -> str:
        """Return compact JSON string."""
        return json.dumps(asdict(self), ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def csv_header() -> str:
        return ",".join(CSV_COLUMNS)
