"""Repository helpers for the crate blacklist."""
from __future__ import annotations

from typing import List

from docshost.db import app_session
from docshost.db.models import BlacklistedCrate


def exists(name: str) -> bool:
    with app_session() as session:
        count = (
            session.query(BlacklistedCrate)
            .filter(BlacklistedCrate.crate_name == name)
            .count()
        )
        return count != 0


def list_names() -> List[str]:
    with app_session() as session:
        rows = session.query(BlacklistedCrate.crate_name).order_by(BlacklistedCrate.crate_name.asc()).all()
        return [row[0] for row in rows]


def insert(name: str) -> None:
    with app_session() as session:
        session.add(BlacklistedCrate(crate_name=name))


def delete(name: str) -> bool:
    with app_session() as session:
        deleted = (
            session.query(BlacklistedCrate)
            .filter(BlacklistedCrate.crate_name == name)
            .delete(synchronize_session=False)
        )
        return bool(deleted)


__all__ = ["exists", "list_names", "insert", "delete"]
