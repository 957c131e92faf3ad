"""Завантаження YAML конфігурації симулятора."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = ROOT / "config" / "simulation.yaml"

# env var -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "ZEROTRUST_API_URL": ("remote", "base_url"),
    "ZEROTRUST_API_TOKEN": ("remote", "token"),
}


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Зчитує YAML файл та повертає його вміст як dict.

    Args:
        path: Шлях до файлу.

    Returns:
        Вміст файлу як словник.

    Raises:
        FileNotFoundError: Якщо файл не знайдено.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load the simulator config and apply environment overrides.

    An explicit *path* must exist.  Without one, ``config/simulation.yaml``
    is used when present and built-in defaults apply otherwise.
    """
    if path is not None:
        cfg = load_yaml(path)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_yaml(DEFAULT_CONFIG_PATH)
    else:
        log.info("No config file found, using built-in defaults")
        cfg = {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            cfg.setdefault(section, {})[key] = value
            log.info("Config override from %s", env_name)
    return cfg
