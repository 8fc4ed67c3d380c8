"""Application configuration accessors.

Centralizes environment variable parsing & defaults. Callers ask for a
value when they need it so tests can monkeypatch the environment freely.
"""
from __future__ import annotations

import os
import secrets
from functools import lru_cache

APP_NAME = "docshost"
APP_VERSION = "0.4.0"
APP_DESCRIPTION = "Documentation host for published crates"

DEFAULT_DB_PATH = "docshost.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024
DEFAULT_PORT = 3000
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def env_int(name: str, default: int) -> int:
    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_db_path() -> str:
    raw = _raw_env("DOCSHOST_DB_PATH", DEFAULT_DB_PATH)
    if raw and raw != ":memory:" and not os.path.isabs(raw):
        data_dir = os.getenv("DOCSHOST_DATA_DIR")
        if data_dir:
            return os.path.join(data_dir, raw)
    return raw  # type: ignore[return-value]


def log_level_name() -> str:
    return _raw_env("DOCSHOST_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def max_file_size() -> int:
    """Largest stored file (bytes) the rustdoc routes will serve."""
    return env_int("DOCSHOST_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE)


def global_alert() -> dict | None:
    """Alert shown in the navigation bar of every page.

    Environment Variables: DOCSHOST_GLOBAL_ALERT_TEXT (required to enable),
    DOCSHOST_GLOBAL_ALERT_URL, DOCSHOST_GLOBAL_ALERT_CSS_CLASS,
    DOCSHOST_GLOBAL_ALERT_ICON.
    """
    text = _optional_env("DOCSHOST_GLOBAL_ALERT_TEXT")
    if text is None:
        return None
    return {
        "text": text,
        "url": _optional_env("DOCSHOST_GLOBAL_ALERT_URL") or "",
        "css_class": _optional_env("DOCSHOST_GLOBAL_ALERT_CSS_CLASS") or "error",
        "fa_icon": _optional_env("DOCSHOST_GLOBAL_ALERT_ICON") or "exclamation-triangle",
    }


def translations_dir() -> str | None:
    return _optional_env("DOCSHOST_TRANSLATIONS_DIR")


def secret_key() -> str:
    return _optional_env("DOCSHOST_SECRET_KEY") or secrets.token_hex(32)


def server_host() -> str:
    return _optional_env("DOCSHOST_HOST") or "0.0.0.0"


def server_port() -> int:
    return env_int("DOCSHOST_PORT", DEFAULT_PORT)


def server_debug() -> bool:
    return env_bool("DOCSHOST_DEBUG", default=False)


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "max_file_size": max_file_size(),
        "global_alert": bool(global_alert()),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "env_bool",
    "env_int",
    "get_db_path",
    "log_level_name",
    "max_file_size",
    "global_alert",
    "translations_dir",
    "secret_key",
    "server_host",
    "server_port",
    "server_debug",
    "metadata",
    "summarize_runtime_config",
]
