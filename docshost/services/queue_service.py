"""Build queue priorities.

Priorities are attached to SQL ``LIKE`` patterns (``%`` matches any run,
``_`` a single character); a crate gets the priority of the first pattern
its name matches, or ``DEFAULT_PRIORITY``.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from docshost.db.repositories import priorities_repo
from docshost.utils.logging import get_logger

LOG = get_logger("queue_service")

DEFAULT_PRIORITY = 0


def get_crate_priority(name: str) -> int:
    priority = priorities_repo.match_priority(name)
    return DEFAULT_PRIORITY if priority is None else priority


def set_crate_priority(pattern: str, priority: int) -> None:
    priorities_repo.upsert(pattern, int(priority))
    LOG.info("Set build priority pattern=%s priority=%s", pattern, priority)


def remove_crate_priority(pattern: str) -> Optional[int]:
    """Remove a pattern, returning the priority it had or None when absent."""
    removed = priorities_repo.delete(pattern)
    if removed is not None:
        LOG.info("Removed build priority pattern=%s priority=%s", pattern, removed)
    return removed


def list_priorities() -> List[Tuple[str, int]]:
    return priorities_repo.list_all()


__all__ = [
    "DEFAULT_PRIORITY",
    "get_crate_priority",
    "set_crate_priority",
    "remove_crate_priority",
    "list_priorities",
]
