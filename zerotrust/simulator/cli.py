"""Командний інтерфейс симулятора Zero-Trust Command Center."""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from zerotrust.remote.client import build_api
from zerotrust.shared.config_loader import load_config
from zerotrust.shared.logger import setup_logging
from zerotrust.shared.seed import init_seed
from zerotrust.simulator.engine import SimulationEngine
from zerotrust.simulator.errors import SimulationError
from zerotrust.simulator.export import write_events


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="zerotrust-sim",
        description="Run a Zero-Trust attack simulation headless and export its events.",
    )
    p.add_argument(
        "--simulation",
        type=str,
        default="ddos_attack",
        help="Catalog id of the attack to simulate (default: ddos_attack). "
        "Use --list to see all ids.",
    )
    p.add_argument(
        "--intensity",
        type=str,
        choices=["low", "medium", "high"],
        default="medium",
        help="Simulation intensity (default: medium).",
    )
    p.add_argument(
        "--duration",
        type=float,
        default=30.0,
        help="Simulated seconds to run before stopping (default: 30).",
    )
    p.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for deterministic output (default: 42).",
    )
    p.add_argument(
        "--start_time",
        type=str,
        default=None,
        help="Simulation start time in ISO-8601 (e.g. 2026-02-26T10:00:00Z). "
        "Defaults to now.",
    )
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to simulation.yaml (default: config/simulation.yaml if present).",
    )
    p.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Use the in-process demo backend instead of the HTTP API.",
    )
    p.add_argument(
        "--live",
        action="store_true",
        default=False,
        help="Run on the wall clock instead of stepping virtual time.",
    )
    p.add_argument(
        "--feeds",
        action="store_true",
        default=False,
        help="Also run the monitoring and threat-map feeds and export their events.",
    )
    p.add_argument(
        "--out",
        type=str,
        default=None,
        help="Write the event log to this file (optional).",
    )
    p.add_argument(
        "--format",
        type=str,
        choices=["csv", "jsonl"],
        default="csv",
        help="Output format: csv (default) or jsonl.",
    )
    p.add_argument(
        "--list",
        action="store_true",
        default=False,
        help="List the attack catalog and exit.",
    )
    p.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    return p


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    cfg = load_config(args.config)
    rng = init_seed(args.seed)

    start_time: datetime | None = None
    if args.start_time:
        start_time = datetime.fromisoformat(args.start_time.replace("Z", "+00:00"))

    engine = SimulationEngine(
        cfg=cfg,
        api=build_api(cfg, offline=args.offline),
        rng=rng,
        start_time=start_time,
    )

    # close() also releases the HTTP client, so it runs on every exit path
    try:
        if args.list:
            for sim in engine.catalog.values():
                print(f"{sim.id:<20} {sim.severity:<9} {sim.name}")
            return

        if args.feeds:
            engine.start_feeds()

        try:
            run = engine.start_simulation(args.simulation, args.intensity)
        except SimulationError as exc:
            parser.error(str(exc))

        mode = "demo mode" if run.demo_mode else "backend"
        print(f"Simulation {run.simulation.name} -> {run.simulation_id} ({mode})")
        print(f"  intensity: {run.intensity}, duration: {args.duration:g}s")

        if args.live:
            print("  Press Ctrl+C to stop.")
            try:
                engine.run_realtime(args.duration)
            except KeyboardInterrupt:
                print("\nSimulation interrupted by user.")
        else:
            engine.advance(args.duration)

        snap = engine.snapshot()
        engine.stop_simulation()
    finally:
        engine.close()

    latest = snap.metrics[0] if snap.metrics else None
    print(f"Simulation complete: {len(snap.events)} events, {len(snap.metrics)} metric samples")
    if latest is not None:
        print(
            f"  threats detected: {latest.threats_detected}, "
            f"blocked: {latest.threats_blocked}, "
            f"response: {latest.response_time_ms} ms"
        )
    print("  nodes: " + ", ".join(f"{n.id}={n.status}" for n in snap.nodes))

    if args.out:
        events = list(snap.events)
        if args.feeds:
            events += snap.monitoring + snap.threats
        out_path = write_events(events, Path(args.out), args.format)
        print(f"Events written: {len(events)} -> {out_path}")


if __name__ == "__main__":
    main()
