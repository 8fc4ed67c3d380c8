"""Sandbox limits applied to documentation builds."""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Optional

from docshost.db.repositories import overrides_repo
from docshost.utils.logging import get_logger

LOG = get_logger("limits_service")

GB = 1024 * 1024 * 1024
KB = 1024


@dataclass(frozen=True)
class Limits:
    memory: int = 3 * GB
    targets: int = 10
    timeout: int = 15 * 60  # seconds
    networking: bool = False
    max_log_size: int = 100 * KB

    def as_dict(self) -> dict:
        return asdict(self)


def limits_for_crate(name: str) -> Limits:
    limits = Limits()
    record = overrides_repo.get_override(name)
    if record is None:
        return limits
    if record["max_memory_bytes"] is not None:
        limits = replace(limits, memory=int(record["max_memory_bytes"]))
    if record["timeout_seconds"] is not None:
        limits = replace(limits, timeout=int(record["timeout_seconds"]))
    if record["max_targets"] is not None:
        limits = replace(limits, targets=int(record["max_targets"]))
    elif record["timeout_seconds"] is not None:
        # a longer timeout is only granted for the default target
        limits = replace(limits, targets=1)
    return limits


def set_override(
    name: str,
    *,
    max_memory_bytes: Optional[int] = None,
    timeout_seconds: Optional[int] = None,
    max_targets: Optional[int] = None,
) -> Limits:
    overrides_repo.upsert_override(
        name=name,
        max_memory_bytes=max_memory_bytes,
        timeout_seconds=timeout_seconds,
        max_targets=max_targets,
    )
    LOG.info(
        "Sandbox override stored name=%s memory=%s timeout=%s targets=%s",
        name,
        max_memory_bytes,
        timeout_seconds,
        max_targets,
    )
    return limits_for_crate(name)


def remove_override(name: str) -> bool:
    removed = overrides_repo.delete_override(name)
    if removed:
        LOG.info("Sandbox override removed name=%s", name)
    return removed


__all__ = ["Limits", "limits_for_crate", "set_override", "remove_override"]
