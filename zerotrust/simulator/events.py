"""Security event generators.

Every "detection" in the command center comes from here: a uniform draw
from the injected ``Random`` is compared against hand-tuned thresholds to
pick severity and status, and the attack type selects a catalog of
remediation actions and descriptions.
"""

from __future__ import annotations

import logging
import random as _random_mod
from datetime import datetime, timezone
from typing import Any

from zerotrust.contracts.enums import EventStatus, Severity
from zerotrust.contracts.event import SecurityEvent

log = logging.getLogger(__name__)

AGENT_ROSTER: list[str] = [
    "Zero-Trust Agent Alpha",
    "Firewall Guardian Beta",
    "Data Shield Gamma",
    "Network Sentinel Delta",
    "Threat Hunter Epsilon",
]

DEFAULT_ATTACK_TYPE = "ddos_attack"

EVENT_CATALOG: dict[str, dict[str, list[str]]] = {
    "ddos_attack": {
        "actions": ["Rate limiting applied", "Traffic filtered", "IP blocked",
                    "Load balancing activated"],
        "descriptions": ["Volumetric attack detected", "Suspicious traffic patterns",
                         "Connection flood detected"],
    },
    "account_takeover": {
        "actions": ["Account locked", "MFA triggered", "Session terminated",
                    "Alert sent to user"],
        "descriptions": ["Credential stuffing attempt", "Multiple failed logins",
                         "Suspicious login location"],
    },
    "data_exfiltration": {
        "actions": ["Data access blocked", "Connection terminated", "File quarantined",
                    "Admin notified"],
        "descriptions": ["Unauthorized data access", "Suspicious file transfer",
                         "Anomalous database query"],
    },
    "credit_card_fraud": {
        "actions": ["Transaction blocked", "Card flagged", "Merchant notified",
                    "Risk score updated"],
        "descriptions": ["Fraudulent transaction pattern", "Velocity check failed",
                         "Geolocation mismatch"],
    },
    "bot_attack": {
        "actions": ["Bot signature detected", "CAPTCHA triggered", "Request throttled",
                    "IP reputation checked"],
        "descriptions": ["Automated behavior detected", "Scraping attempt blocked",
                         "Non-human interaction pattern"],
    },
    "api_abuse": {
        "actions": ["Rate limit exceeded", "API key suspended", "Request queued",
                    "Endpoint protected"],
        "descriptions": ["API flooding detected", "Unusual request patterns",
                         "Resource exhaustion attempt"],
    },
}

# (threshold, value): first threshold strictly below r wins
SEVERITY_THRESHOLDS: list[tuple[float, str]] = [
    (0.7, Severity.CRITICAL.value),
    (0.4, Severity.HIGH.value),
]
STATUS_THRESHOLDS: list[tuple[float, str]] = [
    (0.8, EventStatus.INVESTIGATING.value),
    (0.5, EventStatus.BLOCKED.value),
]

# ── live monitoring feed ────────────────────────────────────────────────

MONITORING_TEMPLATES: dict[str, list[str]] = {
    "fraud": [
        "Suspicious payment pattern detected",
        "Multiple failed payment attempts",
        "Unusual purchase behavior identified",
        "Credit card fraud indicators found",
    ],
    "attack": [
        "Brute force login attempt detected",
        "SQL injection attempt blocked",
        "Bot scraping activity identified",
        "API rate limit exceeded",
    ],
    "breach": [
        "Unauthorized data access attempt",
        "Privilege escalation detected",
        "Sensitive data exposure risk",
        "Account takeover attempt",
    ],
    "anomaly": [
        "Unusual traffic pattern detected",
        "Geographic anomaly identified",
        "Time-based access anomaly",
        "Device fingerprint mismatch",
    ],
}
MONITORING_LOCATIONS = ["New York, NY", "London, UK", "Tokyo, JP", "São Paulo, BR", "Mumbai, IN"]
MONITORING_USERS = ["user_12345", "guest_67890", "admin_99999", "customer_54321"]

# ── threat map feed ─────────────────────────────────────────────────────

THREAT_TYPES: list[str] = [
    "fraud_attempt",
    "suspicious_login",
    "malware_detected",
    "data_breach",
    "phishing_attempt",
    "ddos_attack",
]
THREAT_LOCATIONS = ["New York, US", "London, UK", "Tokyo, JP", "Sydney, AU", "Berlin, DE",
                    "Unknown"]
THREAT_TARGET = "eCommerce Platform"
THREAT_BLOCK_RATE = 0.7
DDOS_ORIGIN_COUNTRIES = ["Russia", "China", "Unknown"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ts(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _pick(rng: _random_mod.Random, seq: list[Any]) -> Any:
    return seq[rng.randint(0, len(seq) - 1)]


def _bucket(r: float, thresholds: list[tuple[float, str]], fallback: str) -> str:
    """Map a uniform draw onto the first threshold it exceeds."""
    for limit, value in thresholds:
        if r > limit:
            return value
    return fallback


def _random_ip(rng: _random_mod.Random) -> str:
    return ".".join(str(rng.randint(0, 255)) for _ in range(4))


def _event_id(prefix: str, rng: _random_mod.Random, now: datetime) -> str:
    return f"{prefix}_{int(now.timestamp() * 1000)}_{rng.getrandbits(36):09x}"


def _title(text: str) -> str:
    return text[:1].upper() + text[1:]


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def generate_event(
    attack_type: str,
    target: str,
    rng: _random_mod.Random,
    now: datetime | None = None,
    roster: list[str] | None = None,
) -> SecurityEvent:
    """Synthesise one security event for *attack_type* hitting *target*.

    Unknown attack types use the DDoS catalog.  Draw order is fixed
    (agent, action, description, severity, status, IP, id) so a seeded
    ``rng`` reproduces the exact same event.
    """
    now = now or _now()
    roster = roster or AGENT_ROSTER
    table = EVENT_CATALOG.get(attack_type)
    if table is None:
        log.debug("No event catalog for %r, using %s", attack_type, DEFAULT_ATTACK_TYPE)
        table = EVENT_CATALOG[DEFAULT_ATTACK_TYPE]

    agent = _pick(rng, roster)
    action = _pick(rng, table["actions"])
    description = _pick(rng, table["descriptions"])
    severity = _bucket(rng.random(), SEVERITY_THRESHOLDS, Severity.MEDIUM.value)
    status = _bucket(rng.random(), STATUS_THRESHOLDS, EventStatus.MITIGATED.value)
    source_ip = _random_ip(rng)

    return SecurityEvent(
        id=_event_id("event", rng, now),
        timestamp=_ts(now),
        attack_type=attack_type,
        target=target,
        severity=severity,
        agent=agent,
        action=action,
        status=status,
        description=description,
        source_ip=source_ip,
    )


def generate_monitoring_event(
    simulation_active: bool,
    rng: _random_mod.Random,
    now: datetime | None = None,
    roster: list[str] | None = None,
) -> SecurityEvent:
    """One entry of the real-time monitoring feed.

    While a simulation runs, everything is high/critical and blocked
    automatically; otherwise severity is uniform and the event is left
    under investigation.
    """
    now = now or _now()
    kind = _pick(rng, list(MONITORING_TEMPLATES))
    if simulation_active:
        severity = Severity.HIGH.value if rng.random() > 0.5 else Severity.CRITICAL.value
    else:
        severity = _pick(rng, [s.value for s in Severity])
    title = _pick(rng, MONITORING_TEMPLATES[kind])

    return SecurityEvent(
        id=_event_id("event", rng, now),
        timestamp=_ts(now),
        attack_type=kind,
        target=THREAT_TARGET,
        severity=severity,
        agent=_pick(rng, roster or AGENT_ROSTER),
        action="Blocked automatically" if simulation_active else "Under investigation",
        status=(EventStatus.BLOCKED.value if simulation_active
                else EventStatus.INVESTIGATING.value),
        description=f"{title} - Automated detection by Zero-Trust agents",
        location=_pick(rng, MONITORING_LOCATIONS),
        user=_pick(rng, MONITORING_USERS),
    )


def threat_details(kind: str, rng: _random_mod.Random) -> dict[str, Any]:
    """Type-specific context attached to a threat-map entry."""
    if kind == "fraud_attempt":
        return {
            "amount": f"${rng.random() * 10000:.2f}",
            "payment_method": "Credit Card",
            "risk_score": round(rng.random(), 2),
        }
    if kind == "suspicious_login":
        return {
            "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
            "attempts": rng.randint(1, 10),
            "last_known_location": "San Francisco, CA",
        }
    if kind == "malware_detected":
        return {
            "filename": "suspicious_file.exe",
            "signature": "Trojan.Generic.123456",
            "quarantined": True,
        }
    if kind == "data_breach":
        return {
            "records_attempted": rng.randint(100, 1099),
            "data_type": "Customer Information",
            "access_level": "Database Query",
        }
    if kind == "phishing_attempt":
        return {
            "target_emails": rng.randint(10, 59),
            "domain": "fake-ecommerce.com",
            "reported": rng.random() > 0.5,
        }
    if kind == "ddos_attack":
        return {
            "requests_per_second": rng.randint(1000, 10999),
            "origin_countries": list(DDOS_ORIGIN_COUNTRIES),
            "duration": f"{rng.randint(1, 30)} minutes",
        }
    return {}


def generate_threat(rng: _random_mod.Random, now: datetime | None = None) -> SecurityEvent:
    """One entry of the threat-map feed (70 % blocked, else left detected)."""
    now = now or _now()
    kind = _pick(rng, THREAT_TYPES)
    severity = _pick(rng, [s.value for s in Severity])
    source_ip = _random_ip(rng)
    location = _pick(rng, THREAT_LOCATIONS)
    blocked = rng.random() < THREAT_BLOCK_RATE
    details = threat_details(kind, rng)

    descriptions = {
        "fraud_attempt": f"{_title(severity)} risk payment transaction detected",
        "suspicious_login": "Unusual login pattern from unrecognized device",
        "malware_detected": f"{_title(severity)} threat signature identified",
        "data_breach": "Unauthorized data access attempt detected",
        "phishing_attempt": "Malicious email or link targeting users",
        "ddos_attack": f"{_title(severity)} volume network attack",
    }
    return SecurityEvent(
        id=_event_id("threat", rng, now),
        timestamp=_ts(now),
        attack_type=kind,
        target=THREAT_TARGET,
        severity=severity,
        agent="",
        action="Blocked automatically" if blocked else "Escalated for review",
        status=EventStatus.BLOCKED.value if blocked else EventStatus.DETECTED.value,
        description=descriptions[kind],
        source_ip=source_ip,
        location=location,
        details=details,
    )
