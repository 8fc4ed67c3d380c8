"""Repository helpers for the JSON key/value ``config`` table."""
from __future__ import annotations

import json
from typing import Any

from docshost.db import app_session
from docshost.db.models import ConfigEntry


def get_value(name: str, default: Any = None) -> Any:
    with app_session() as session:
        record = session.get(ConfigEntry, name)
        if record is None:
            return default
        decoded = record.decoded()
        return default if decoded is None else decoded


def set_value(name: str, value: Any) -> None:
    encoded = json.dumps(value, sort_keys=True)
    with app_session() as session:
        record = session.get(ConfigEntry, name)
        if record is None:
            session.add(ConfigEntry(name=name, value=encoded))
        else:
            record.value = encoded


__all__ = ["get_value", "set_value"]
