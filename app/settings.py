from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)
_SETTINGS: Settings | None = None

DEFAULT_LOCAL_RELAY_URL = "http://127.0.0.1:8000/api/proxy"
DEFAULT_RELAY_TIMEOUT_SECONDS = 12.0
DEFAULT_LOG_BUFFER_SIZE = 200
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    local_relay_url: str = DEFAULT_LOCAL_RELAY_URL
    relay_timeout_seconds: float = DEFAULT_RELAY_TIMEOUT_SECONDS
    # Untagged events in these feeds have been football so far; a feed with
    # another default can turn this off.
    assume_untagged_football: bool = True
    source_names: tuple[str, ...] = ()
    log_buffer_size: int = DEFAULT_LOG_BUFFER_SIZE


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean %s=%r, using default %s", name, raw, default)
    return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        logger.warning("Invalid positive number %s=%r, using default %s", name, raw, default)
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        logger.warning("Invalid positive integer %s=%r, using default %s", name, raw, default)
        return default
    return value


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name) or ""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def load_settings() -> Settings:
    return Settings(
        local_relay_url=(os.getenv("ODDS_LOCAL_RELAY_URL") or DEFAULT_LOCAL_RELAY_URL).strip(),
        relay_timeout_seconds=_env_float("ODDS_RELAY_TIMEOUT_SECONDS", DEFAULT_RELAY_TIMEOUT_SECONDS),
        assume_untagged_football=_env_bool("ODDS_ASSUME_UNTAGGED_FOOTBALL", True),
        source_names=_env_list("ODDS_SOURCES"),
        log_buffer_size=_env_int("ODDS_LOG_BUFFER_SIZE", DEFAULT_LOG_BUFFER_SIZE),
    )


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS
