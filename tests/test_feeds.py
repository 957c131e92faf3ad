"""Tests for zerotrust.simulator.feeds — monitoring and threat-map streams."""

from __future__ import annotations

import random

from tests.conftest import ScriptedRandom
from zerotrust.simulator.feeds import MonitoringFeed, ThreatMapFeed


class TestMonitoringFeed:
    def test_delay_within_jitter(self, clock):
        feed = MonitoringFeed(random.Random(3), clock)
        for _ in range(100):
            assert 2.0 <= feed.next_delay() <= 5.0

    def test_capacity(self, clock):
        feed = MonitoringFeed(random.Random(3), clock, capacity=10)
        for _ in range(25):
            feed.tick(False)
        assert len(feed.events) == 10

    def test_simulation_flag_passed_through(self, clock):
        feed = MonitoringFeed(random.Random(3), clock)
        ev = feed.tick(True)
        assert ev.status == "blocked"
        assert feed.events.latest is ev


class TestThreatMapFeed:
    def test_seed_does_not_count(self, clock):
        feed = ThreatMapFeed(random.Random(1), clock)
        feed.seed(5)
        assert len(feed.threats) == 5
        assert feed.stats.total_threats == 0
        assert feed.stats.last_update == "2026-02-26T10:00:00.000Z"

    def test_no_threat_at_or_below_threshold(self, clock):
        feed = ThreatMapFeed(ScriptedRandom([0.6]), clock)
        assert feed.tick() is None
        assert len(feed.threats) == 0

    def test_blocked_threat_updates_stats(self, clock):
        # 0.61 -> add a threat; 0.1 -> blocked
        feed = ThreatMapFeed(ScriptedRandom([0.61, 0.1]), clock)
        threat = feed.tick()
        assert threat is not None and threat.status == "blocked"
        assert (feed.stats.total_threats, feed.stats.blocked, feed.stats.active_incidents) == (1, 1, 0)

    def test_detected_threat_is_incident(self, clock):
        feed = ThreatMapFeed(ScriptedRandom([0.9, 0.9]), clock)
        threat = feed.tick()
        assert threat is not None and threat.status == "detected"
        assert feed.stats.active_incidents == 1
        assert feed.stats.last_update == threat.timestamp

    def test_stats_add_up(self, clock):
        feed = ThreatMapFeed(random.Random(8), clock, capacity=20)
        for _ in range(200):
            feed.tick()
        s = feed.stats
        assert s.total_threats == s.blocked + s.active_incidents
        assert len(feed.threats) == min(20, s.total_threats)

    def test_paused_feed_adds_nothing(self, clock):
        feed = ThreatMapFeed(ScriptedRandom([0.99]), clock)
        feed.live = False
        assert feed.tick() is None
        assert feed.stats.total_threats == 0
