"""Seedable random source for reproducible simulations."""

from __future__ import annotations

import logging
import random

log = logging.getLogger(__name__)


def init_seed(seed: int | None = None) -> random.Random:
    """Return a dedicated ``Random`` instance for one engine.

    With ``seed=None`` the generator is seeded from system entropy, which is
    what the live dashboard wants.  Tests and the CLI pass an explicit seed
    so every draw (severities, node transitions, pulses) is repeatable.
    """
    rng = random.Random(seed)
    if seed is None:
        log.debug("Random source initialised from system entropy")
    else:
        log.info("Random seed initialised: %d", seed)
    return rng
