"""Stored file record and storage errors."""
from __future__ import annotations

import datetime
import mimetypes
from dataclasses import dataclass, field
from typing import Optional


class StorageError(RuntimeError):
    """Base error for storage operations."""


class PathNotFoundError(StorageError):
    """Raised when the requested path is not stored."""


class SizeLimitReachedError(StorageError):
    """Raised when a stored file is larger than the caller allows."""


@dataclass
class Blob:
    path: str
    mime: str
    content: bytes
    compression: Optional[int] = None
    date_updated: datetime.datetime = field(default_factory=datetime.datetime.utcnow)


def detect_mime(path: str) -> str:
    if path.endswith(".js"):
        return "application/javascript"
    guessed, _encoding = mimetypes.guess_type(path)
    return guessed or "text/plain"


__all__ = ["Blob", "PathNotFoundError", "SizeLimitReachedError", "StorageError", "detect_mime"]
