"""Запис журналу подій у CSV / JSONL."""

from __future__ import annotations

import logging
from pathlib import Path

from zerotrust.contracts.event import SecurityEvent

log = logging.getLogger(__name__)


def write_csv(events: list[SecurityEvent], path: Path) -> None:
    """Write events to a CSV file with header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(SecurityEvent.csv_header() + "\n")
        for ev in events:
            fh.write(ev.to_csv_row() + "\n")
    log.info("Wrote %d events to %s", len(events), path)


def write_jsonl(events: list[SecurityEvent], path: Path) -> None:
    """Write events to a JSONL file (one JSON per line)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        for ev in events:
            fh.write(ev.to_json() + "\n")
    log.info("Wrote %d events to %s", len(events), path)


def write_events(events: list[SecurityEvent], path: Path, fmt: str = "csv") -> Path:
    """Write *events* oldest-first in *fmt*, fixing the suffix if needed."""
    ordered = sorted(events, key=lambda e: e.timestamp)
    if fmt == "jsonl":
        if path.suffix not in (".jsonl", ".ndjson", ".json"):
            path = path.with_suffix(".jsonl")
        write_jsonl(ordered, path)
    else:
        if path.suffix != ".csv":
            path = path.with_suffix(".csv")
        write_csv(ordered, path)
    return path
