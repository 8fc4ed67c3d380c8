"""Repository helpers for build queue priority patterns."""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import literal

from docshost.db import app_session
from docshost.db.models import CratePriority


def match_priority(name: str) -> Optional[int]:
    """Priority of the first stored pattern that matches ``name`` via LIKE."""
    with app_session() as session:
        row = (
            session.query(CratePriority.priority)
            .filter(literal(name).like(CratePriority.pattern))
            .limit(1)
            .first()
        )
        return int(row[0]) if row else None


def upsert(pattern: str, priority: int) -> None:
    with app_session() as session:
        record = session.get(CratePriority, pattern)
        if record is None:
            session.add(CratePriority(pattern=pattern, priority=priority))
        else:
            record.priority = priority


def delete(pattern: str) -> Optional[int]:
    with app_session() as session:
        record = session.get(CratePriority, pattern)
        if record is None:
            return None
        priority = int(record.priority)
        session.delete(record)
        return priority


def list_all() -> List[Tuple[str, int]]:
    with app_session() as session:
        rows = session.query(CratePriority).order_by(CratePriority.pattern.asc()).all()
        return [(row.pattern, int(row.priority)) for row in rows]


__all__ = ["match_priority", "upsert", "delete", "list_all"]
