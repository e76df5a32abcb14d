from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LEVEL_ENV_VAR = "TRIPDESK_LOG_LEVEL"
DEBUG_ENV_VAR = "TRIPDESK_DEBUG"

# Chatty libraries kept at WARNING unless the app itself runs at DEBUG.
_NOISY_LOGGERS = ("urllib3", "requests", "watchfiles", "uvicorn.access")


def _coerce_level(value: Optional[str], fallback: int) -> int:
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    candidate = logging.getLevelName(text.upper())
    return candidate if isinstance(candidate, int) else fallback


def _env_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_level(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Level forced by the environment, or ``None`` when nothing is set.

    ``TRIPDESK_LOG_LEVEL`` wins over ``TRIPDESK_DEBUG``.
    """
    env = os.environ if environ is None else environ
    explicit = env.get(LEVEL_ENV_VAR)
    if explicit and explicit.strip():
        return _coerce_level(explicit, logging.INFO)
    if _env_truthy(env.get(DEBUG_ENV_VAR)):
        return logging.DEBUG
    return None


def _tune_noisy_loggers(level: int) -> None:
    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def configure_root(default_level: int | str = logging.INFO) -> int:
    """
    Configure the root logger once with a compact format.

    Environment overrides:
      - TRIPDESK_LOG_LEVEL: explicit level name or number
      - TRIPDESK_DEBUG: truthy -> DEBUG
    """
    fallback = (
        _coerce_level(default_level, logging.INFO)
        if isinstance(default_level, str)
        else int(default_level)
    )
    forced = env_level()
    effective = forced if forced is not None else fallback

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    root.setLevel(effective)
    _tune_noisy_loggers(effective)
    return effective


def apply_gui_preferences(debug_enabled: bool) -> int:
    """
    Apply the "debug logging" setting from the settings page.
    Environment overrides still win. Returns the effective level.
    """
    forced = env_level()
    level = forced if forced is not None else (logging.DEBUG if debug_enabled else logging.INFO)
    logging.getLogger().setLevel(level)
    _tune_noisy_loggers(level)
    return level


def env_requests_debug() -> bool:
    """Return True if environment variables force DEBUG logging."""
    forced = env_level()
    return forced is not None and forced <= logging.DEBUG


__all__ = [
    "DEBUG_ENV_VAR",
    "LEVEL_ENV_VAR",
    "apply_gui_preferences",
    "configure_root",
    "env_level",
    "env_requests_debug",
]
