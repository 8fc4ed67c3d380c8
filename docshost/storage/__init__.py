"""Storage of generated documentation and source files.

Only the database backend is shipped; `Storage` is the facade the rest of
the application talks to so a second backend can slot in behind it.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from .blob import Blob, PathNotFoundError, SizeLimitReachedError, StorageError, detect_mime
from .database import DatabaseBackend


class Storage:
    def __init__(self, backend: Optional[DatabaseBackend] = None):
        self._backend = backend or DatabaseBackend()

    def exists(self, path: str) -> bool:
        return self._backend.exists(path)

    def get(self, path: str, max_size: int) -> Blob:
        return self._backend.get(path, max_size)

    def store_blobs(self, blobs: Iterable[Blob]) -> int:
        batch: List[Blob] = list(blobs)
        if not batch:
            return 0
        self._backend.store_batch(batch)
        return len(batch)

    def store_one(self, path: str, content: bytes, mime: Optional[str] = None) -> Blob:
        blob = Blob(path=path, mime=mime or detect_mime(path), content=content)
        self._backend.store_batch([blob])
        return blob

    def list_prefix(self, prefix: str) -> List[str]:
        return self._backend.list_prefix(prefix)

    def delete_prefix(self, prefix: str) -> int:
        return self._backend.delete_prefix(prefix)


__all__ = [
    "Blob",
    "DatabaseBackend",
    "PathNotFoundError",
    "SizeLimitReachedError",
    "Storage",
    "StorageError",
    "detect_mime",
]
