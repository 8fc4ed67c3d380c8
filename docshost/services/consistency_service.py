"""Snapshot of which crate versions the database knows about."""
from __future__ import annotations

from typing import Dict, List

from docshost.db import app_session
from docshost.db.models import Crate, Release


def load() -> Dict[str, List[str]]:
    """Crate name -> versions, crates in id order and versions in release id order."""
    data: Dict[str, List[str]] = {}
    with app_session() as session:
        rows = (
            session.query(Crate.name, Release.version)
            .join(Release, Release.crate_id == Crate.id)
            .order_by(Crate.id, Release.id)
            .all()
        )
    for name, version in rows:
        data.setdefault(name, []).append(version)
    return data


__all__ = ["load"]
