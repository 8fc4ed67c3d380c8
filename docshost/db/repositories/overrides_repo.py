"""Repository helpers for per-crate sandbox overrides."""
from __future__ import annotations

from typing import Optional

from docshost.db import app_session
from docshost.db.models import SandboxOverride


def get_override(name: str) -> Optional[dict]:
    with app_session() as session:
        record = session.get(SandboxOverride, name)
        if record is None:
            return None
        return {
            "crate_name": record.crate_name,
            "max_memory_bytes": record.max_memory_bytes,
            "timeout_seconds": record.timeout_seconds,
            "max_targets": record.max_targets,
        }


def upsert_override(
    *,
    name: str,
    max_memory_bytes: Optional[int] = None,
    timeout_seconds: Optional[int] = None,
    max_targets: Optional[int] = None,
) -> None:
    with app_session() as session:
        record = session.get(SandboxOverride, name)
        if record is None:
            record = SandboxOverride(crate_name=name)
            session.add(record)
        record.max_memory_bytes = max_memory_bytes
        record.timeout_seconds = timeout_seconds
        record.max_targets = max_targets


def delete_override(name: str) -> bool:
    with app_session() as session:
        deleted = (
            session.query(SandboxOverride)
            .filter(SandboxOverride.crate_name == name)
            .delete(synchronize_session=False)
        )
        return bool(deleted)


__all__ = ["get_override", "upsert_override", "delete_override"]
