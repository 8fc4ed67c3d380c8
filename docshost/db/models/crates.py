"""ORM models for crates, releases and the per-release metadata tables."""
from __future__ import annotations

import datetime
import json

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _load_json_list(raw: str | None) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return value if isinstance(value, list) else []


class Crate(Base):
    __tablename__ = "crates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    latest_version_id = Column(Integer, nullable=True)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Crate id={self.id} name={self.name}>"


class Repository(Base):
    """Source-hosting repository stats attached to releases."""

    __tablename__ = "repositories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    host = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    stars = Column(Integer, nullable=False, default=0)
    forks = Column(Integer, nullable=False, default=0)
    issues = Column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("host", "name", name="uq_repositories_host_name"),)


class Release(Base):
    __tablename__ = "releases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    crate_id = Column(Integer, ForeignKey("crates.id"), nullable=False, index=True)
    version = Column(String(100), nullable=False)
    release_time = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    description = Column(Text, nullable=True)
    license = Column(String(255), nullable=True)
    homepage_url = Column(String(500), nullable=True)
    documentation_url = Column(String(500), nullable=True)
    repository_url = Column(String(500), nullable=True)
    repository_id = Column(Integer, ForeignKey("repositories.id"), nullable=True)
    target_name = Column(String(255), nullable=True)
    default_target = Column(String(100), nullable=True)
    doc_targets = Column(Text, nullable=False, default="[]")
    dependencies = Column(Text, nullable=False, default="[]")
    is_library = Column(Boolean, nullable=False, default=True)
    build_status = Column(Boolean, nullable=False, default=False)
    rustdoc_status = Column(Boolean, nullable=False, default=False)
    yanked = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("crate_id", "version", name="uq_releases_crate_version"),
        Index("ix_releases_release_time", "release_time"),
    )

    def doc_targets_list(self) -> list:
        return [str(t) for t in _load_json_list(self.doc_targets)]

    def dependencies_list(self) -> list:
        """Stored as JSON ``[[name, req, kind], ...]``; kind may be missing."""
        return _load_json_list(self.dependencies)


class Author(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)


class AuthorRel(Base):
    __tablename__ = "author_rels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rid = Column(Integer, ForeignKey("releases.id"), nullable=False, index=True)
    aid = Column(Integer, ForeignKey("authors.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (UniqueConstraint("rid", "aid", name="uq_author_rels_rid_aid"),)


class Keyword(Base):
    __tablename__ = "keywords"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)


class KeywordRel(Base):
    __tablename__ = "keyword_rels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rid = Column(Integer, ForeignKey("releases.id"), nullable=False, index=True)
    kid = Column(Integer, ForeignKey("keywords.id"), nullable=False, index=True)


class Build(Base):
    __tablename__ = "builds"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rid = Column(Integer, ForeignKey("releases.id"), nullable=False, index=True)
    rustc_version = Column(String(100), nullable=False)
    docsrs_version = Column(String(100), nullable=False)
    build_status = Column(Boolean, nullable=False)
    build_time = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    output = Column(Text, nullable=True)

    def as_dict(self, include_output: bool = True) -> dict:
        data = {
            "id": self.id,
            "rustc_version": self.rustc_version,
            "docsrs_version": self.docsrs_version,
            "build_status": bool(self.build_status),
            "build_time": self.build_time.isoformat() + "Z" if self.build_time else None,
        }
        if include_output:
            data["output"] = self.output
        return data


class CompressionRel(Base):
    __tablename__ = "compression_rels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    release = Column(Integer, ForeignKey("releases.id"), nullable=False, index=True)
    algorithm = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("release", "algorithm", name="uq_compression_rels"),)


class DocCoverage(Base):
    __tablename__ = "doc_coverage"

    id = Column(Integer, primary_key=True, autoincrement=True)
    release_id = Column(Integer, ForeignKey("releases.id"), nullable=False, unique=True)
    total_items = Column(Integer, nullable=True)
    documented_items = Column(Integer, nullable=True)


class File(Base):
    """Stored documentation/source blobs (database storage backend)."""

    __tablename__ = "files"

    path = Column(String(4096), primary_key=True)
    mime = Column(String(255), nullable=False)
    content = Column(LargeBinary, nullable=False)
    compression = Column(Integer, nullable=True)
    date_updated = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )


__all__ = [
    "Base",
    "Crate",
    "Repository",
    "Release",
    "Author",
    "AuthorRel",
    "Keyword",
    "KeywordRel",
    "Build",
    "CompressionRel",
    "DocCoverage",
    "File",
]
