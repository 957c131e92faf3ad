"""Cosmetic password gate in front of the security dashboard.

Not a security boundary: the demo password is printed on the login page.
The unlock flag lives in the per-browser session and is honoured for four
hours.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import MutableMapping
from datetime import datetime, timedelta, timezone
from typing import Any

log = logging.getLogger(__name__)

SESSION_FLAG = "security-authenticated"
SESSION_TIME = "security-auth-time"
GATE_VALIDITY = timedelta(hours=4)
DEMO_PASSWORD = "ZeroTrust2024!"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def unlock(
    session: MutableMapping[str, Any],
    password: str,
    expected: str = DEMO_PASSWORD,
    now: datetime | None = None,
) -> bool:
    """Record an unlock if *password* matches; return whether it did."""
    if not hmac.compare_digest(password.encode(), expected.encode()):
        log.info("Security gate: wrong password")
        return False
    session[SESSION_FLAG] = True
    session[SESSION_TIME] = (now or _utcnow()).isoformat()
    log.info("Security gate unlocked")
    return True


def lock(session: MutableMapping[str, Any]) -> None:
    session.pop(SESSION_FLAG, None)
    session.pop(SESSION_TIME, None)


def is_unlocked(
    session: MutableMapping[str, Any],
    now: datetime | None = None,
    validity: timedelta = GATE_VALIDITY,
) -> bool:
    """True while the unlock flag is younger than *validity*.

    Expired or unreadable flags are cleared from the session.
    """
    if session.get(SESSION_FLAG) is not True or SESSION_TIME not in session:
        return False
    try:
        unlocked_at = datetime.fromisoformat(str(session[SESSION_TIME]))
    except ValueError:
        lock(session)
        return False
    if (now or _utcnow()) - unlocked_at < validity:
        return True
    log.info("Security gate session expired")
    lock(session)
    return False
