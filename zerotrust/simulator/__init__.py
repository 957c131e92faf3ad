"""Zero-Trust Command Center — client-side security simulation engine.

Modules
───────
  events      — synthesise SecurityEvents from weighted catalogs
  metrics     — rolling ThreatMetricSample window + admin overview drift
  network     — topology status transitions and threat pulses
  controller  — start/stop state machine with demo-mode fallback
  feeds       — real-time monitoring and threat-map streams
  alerts      — inbox for inbound live-channel messages
  scheduler   — one virtual clock driving every timer
  engine      — composition root wiring the above together
  cli         — argparse entry-point
"""
