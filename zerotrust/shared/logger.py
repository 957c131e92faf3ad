"""Налаштування логування."""

from __future__ import annotations

import logging
import os
import sys

_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Налаштовує кореневий логер командного центру.

    Args:
        level: Рівень логування (DEBUG, INFO, WARNING, ERROR). Якщо не
            задано, береться з ``ZEROTRUST_LOG_LEVEL`` або INFO.
    """
    level = level or os.environ.get("ZEROTRUST_LOG_LEVEL", "INFO")
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format=_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO; keep the simulation log readable
    logging.getLogger("httpx").setLevel(max(numeric, logging.WARNING))
