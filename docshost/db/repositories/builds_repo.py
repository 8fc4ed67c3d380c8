"""Repository helpers for documentation build records."""
from __future__ import annotations

from typing import List

from docshost.db import app_session
from docshost.db.models import Build, Crate, Release


def list_builds(name: str, version: str) -> List[dict]:
    """Builds of one release, newest id first."""
    with app_session() as session:
        rows = (
            session.query(Build)
            .join(Release, Release.id == Build.rid)
            .join(Crate, Crate.id == Release.crate_id)
            .filter(Crate.name == name, Release.version == version)
            .order_by(Build.id.desc())
            .all()
        )
        return [row.as_dict() for row in rows]


__all__ = ["list_builds"]
