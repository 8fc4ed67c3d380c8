"""Removal of whole crates or single versions (database + storage)."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from docshost.db import app_session
from docshost.db.models import (
    AuthorRel,
    Build,
    CompressionRel,
    Crate,
    DocCoverage,
    KeywordRel,
    Release,
    SandboxOverride,
)
from docshost.services.release_service import update_latest_version_id
from docshost.storage import Storage
from docshost.utils.logging import get_logger

LOG = get_logger("delete_service")

# Storage directories holding a subdirectory per crate.
STORAGE_PATHS_TO_DELETE = ("rustdoc", "sources")

# Per-release metadata tables and the column referencing releases.id.
_RELEASE_METADATA = (
    (AuthorRel, AuthorRel.rid),
    (KeywordRel, KeywordRel.rid),
    (Build, Build.rid),
    (CompressionRel, CompressionRel.release),
    (DocCoverage, DocCoverage.release_id),
)


class CrateDeletionError(RuntimeError):
    """Base error for deletions."""


class MissingCrateError(CrateDeletionError):
    def __init__(self, name: str):
        super().__init__(f"crate is missing: {name}")
        self.name = name


class MissingVersionError(CrateDeletionError):
    def __init__(self, name: str, version: str):
        super().__init__(f"version is missing: {name} {version}")
        self.name = name
        self.version = version


def _get_id(session: Session, name: str) -> int:
    crate_id = session.query(Crate.id).filter(Crate.name == name).scalar()
    if crate_id is None:
        raise MissingCrateError(name)
    return int(crate_id)


def _delete_release_metadata(session: Session, release_ids) -> None:
    for model, column in _RELEASE_METADATA:
        session.query(model).filter(column.in_(release_ids)).delete(synchronize_session=False)


def _delete_crate_from_database(session: Session, name: str, crate_id: int) -> None:
    session.query(SandboxOverride).filter(SandboxOverride.crate_name == name).delete(
        synchronize_session=False
    )
    release_ids = select(Release.id).where(Release.crate_id == crate_id)
    _delete_release_metadata(session, release_ids)
    session.query(Release).filter(Release.crate_id == crate_id).delete(synchronize_session=False)
    session.query(Crate).filter(Crate.id == crate_id).delete(synchronize_session=False)


def _delete_version_from_database(session: Session, name: str, version: str) -> None:
    crate_id = _get_id(session, name)
    release_ids = select(Release.id).where(Release.crate_id == crate_id, Release.version == version)
    exists = session.query(Release.id).filter(Release.crate_id == crate_id, Release.version == version).first()
    if exists is None:
        raise MissingVersionError(name, version)
    _delete_release_metadata(session, release_ids)
    session.query(Release).filter(
        Release.crate_id == crate_id, Release.version == version
    ).delete(synchronize_session=False)
    session.flush()
    update_latest_version_id(session, crate_id)


def delete_crate(name: str, storage: Optional[Storage] = None) -> None:
    storage = storage or Storage()
    # one session == one transaction; any failure rolls everything back
    with app_session() as session:
        crate_id = _get_id(session, name)
        _delete_crate_from_database(session, name, crate_id)
    for prefix in STORAGE_PATHS_TO_DELETE:
        storage.delete_prefix(f"{prefix}/{name}/")
    LOG.info("Deleted crate name=%s", name)


def delete_version(name: str, version: str, storage: Optional[Storage] = None) -> None:
    storage = storage or Storage()
    with app_session() as session:
        _delete_version_from_database(session, name, version)
    for prefix in STORAGE_PATHS_TO_DELETE:
        storage.delete_prefix(f"{prefix}/{name}/{version}/")
    LOG.info("Deleted version name=%s version=%s", name, version)


__all__ = [
    "STORAGE_PATHS_TO_DELETE",
    "CrateDeletionError",
    "MissingCrateError",
    "MissingVersionError",
    "delete_crate",
    "delete_version",
]
