"""Database storage backend (the ``files`` table)."""
from __future__ import annotations

import datetime
from typing import List

from sqlalchemy import case, func

from docshost.db import app_session
from docshost.db.models import File
from docshost.storage.blob import Blob, PathNotFoundError, SizeLimitReachedError
from docshost.utils.logging import get_logger

LOG = get_logger("storage.database")

_LIKE_ESCAPE = "\\"


def escape_like(prefix: str) -> str:
    return (
        prefix.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


class DatabaseBackend:
    def exists(self, path: str) -> bool:
        with app_session() as session:
            return session.query(File.path).filter(File.path == path).count() > 0

    def get(self, path: str, max_size: int) -> Blob:
        # The size check happens in SQL so oversized content is never fetched.
        too_big = func.length(File.content) > max_size
        with app_session() as session:
            row = (
                session.query(
                    File.path,
                    File.mime,
                    File.date_updated,
                    File.compression,
                    case((too_big, None), else_=File.content).label("content"),
                    too_big.label("is_too_big"),
                )
                .filter(File.path == path)
                .one_or_none()
            )
        if row is None:
            raise PathNotFoundError(path)
        if row.is_too_big:
            raise SizeLimitReachedError(f"{path} exceeds {max_size} bytes")
        return Blob(
            path=row.path,
            mime=row.mime,
            content=bytes(row.content),
            compression=row.compression,
            date_updated=row.date_updated,
        )

    def store_batch(self, batch: List[Blob]) -> None:
        now = datetime.datetime.utcnow()
        with app_session() as session:
            for blob in batch:
                record = session.get(File, blob.path)
                if record is None:
                    session.add(
                        File(
                            path=blob.path,
                            mime=blob.mime,
                            content=blob.content,
                            compression=blob.compression,
                            date_updated=now,
                        )
                    )
                else:
                    record.mime = blob.mime
                    record.content = blob.content
                    record.compression = blob.compression
                    record.date_updated = now
        LOG.debug("Stored %s files", len(batch))

    def list_prefix(self, prefix: str) -> List[str]:
        with app_session() as session:
            rows = (
                session.query(File.path)
                .filter(File.path.like(escape_like(prefix) + "%", escape=_LIKE_ESCAPE))
                .order_by(File.path)
                .all()
            )
        return [row.path for row in rows]

    def delete_prefix(self, prefix: str) -> int:
        with app_session() as session:
            deleted = (
                session.query(File)
                .filter(File.path.like(escape_like(prefix) + "%", escape=_LIKE_ESCAPE))
                .delete(synchronize_session=False)
            )
        LOG.debug("Deleted %s files under prefix %s", deleted, prefix)
        return int(deleted or 0)


__all__ = ["DatabaseBackend", "escape_like"]
