"""Import of built releases into the database (and their files into storage)."""
from __future__ import annotations

import datetime
import json
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from docshost.db import app_session
from docshost.db.models import (
    Author,
    AuthorRel,
    Build,
    CompressionRel,
    Crate,
    DocCoverage,
    Keyword,
    KeywordRel,
    Release,
    Repository,
)
from docshost.services import blacklist_service
from docshost.storage import Blob, Storage
from docshost.utils.cargo_metadata import Package
from docshost.utils.logging import get_logger
from docshost.utils.versions import pick_latest

LOG = get_logger("release_service")

_AUTHOR_RE = re.compile(r"^\s*(?P<name>[^<]+?)\s*(?:<(?P<email>[^>]*)>)?\s*$")
_SLUG_RE = re.compile(r"[^a-z0-9]+")
_GITHUB_RE = re.compile(r"^https?://github\.com/(?P<name>[^/]+/[^/.]+)", re.IGNORECASE)


class ReleaseImportError(RuntimeError):
    """Base error for release imports."""


class CrateBlacklistedError(ReleaseImportError):
    def __init__(self, name: str):
        super().__init__(f"crate {name} is on the blacklist")
        self.name = name


class ReleaseNotFoundError(ReleaseImportError):
    def __init__(self, name: str, version: str):
        super().__init__(f"release not found: {name} {version}")


@dataclass(frozen=True)
class DocCoverageCounts:
    total_items: Optional[int]
    documented_items: Optional[int]


@dataclass(frozen=True)
class RepositoryStats:
    stars: int = 0
    forks: int = 0
    issues: int = 0


def slugify(value: str) -> str:
    return _SLUG_RE.sub("-", (value or "").lower()).strip("-")


def parse_author(raw: str) -> tuple[str, Optional[str]]:
    match = _AUTHOR_RE.match(raw or "")
    if not match:
        return (raw or "").strip(), None
    email = (match.group("email") or "").strip() or None
    return match.group("name").strip(), email


def _dependency_rows(package: Package) -> List[list]:
    return [[dep.name, dep.req, dep.kind or "normal"] for dep in package.dependencies]


def _upsert_crate(session: Session, name: str) -> Crate:
    crate = session.query(Crate).filter(Crate.name == name).one_or_none()
    if crate is None:
        crate = Crate(name=name)
        session.add(crate)
        session.flush()
    return crate


def _upsert_repository(session: Session, url: Optional[str], stats: Optional[RepositoryStats]) -> Optional[int]:
    if not url or stats is None:
        return None
    match = _GITHUB_RE.match(url)
    if not match:
        return None
    repo_name = match.group("name")
    record = (
        session.query(Repository)
        .filter(Repository.host == "github.com", Repository.name == repo_name)
        .one_or_none()
    )
    if record is None:
        record = Repository(host="github.com", name=repo_name)
        session.add(record)
    record.stars = stats.stars
    record.forks = stats.forks
    record.issues = stats.issues
    session.flush()
    return record.id


def _replace_authors(session: Session, release_id: int, authors: Sequence[str]) -> None:
    session.query(AuthorRel).filter(AuthorRel.rid == release_id).delete(synchronize_session=False)
    for position, raw in enumerate(authors):
        name, email = parse_author(raw)
        slug = slugify(name)
        if not slug:
            continue
        author = session.query(Author).filter(Author.slug == slug).one_or_none()
        if author is None:
            author = Author(name=name, email=email, slug=slug)
            session.add(author)
            session.flush()
        exists = (
            session.query(AuthorRel)
            .filter(AuthorRel.rid == release_id, AuthorRel.aid == author.id)
            .first()
        )
        if exists is None:
            session.add(AuthorRel(rid=release_id, aid=author.id, position=position))


def _replace_keywords(session: Session, release_id: int, keywords: Sequence[str]) -> None:
    session.query(KeywordRel).filter(KeywordRel.rid == release_id).delete(synchronize_session=False)
    seen = set()
    for raw in keywords:
        slug = slugify(raw)
        if not slug or slug in seen:
            continue
        seen.add(slug)
        keyword = session.query(Keyword).filter(Keyword.slug == slug).one_or_none()
        if keyword is None:
            keyword = Keyword(name=raw.strip(), slug=slug)
            session.add(keyword)
            session.flush()
        session.add(KeywordRel(rid=release_id, kid=keyword.id))


def _store_compression(session: Session, release_id: int, blobs: Sequence[Blob]) -> None:
    algorithms = {blob.compression for blob in blobs if blob.compression is not None}
    for algorithm in sorted(algorithms):
        exists = (
            session.query(CompressionRel)
            .filter(CompressionRel.release == release_id, CompressionRel.algorithm == algorithm)
            .first()
        )
        if exists is None:
            session.add(CompressionRel(release=release_id, algorithm=algorithm))


def _store_doc_coverage(session: Session, release_id: int, coverage: Optional[DocCoverageCounts]) -> None:
    if coverage is None:
        return
    record = session.query(DocCoverage).filter(DocCoverage.release_id == release_id).one_or_none()
    if record is None:
        record = DocCoverage(release_id=release_id)
        session.add(record)
    record.total_items = coverage.total_items
    record.documented_items = coverage.documented_items


def update_latest_version_id(session: Session, crate_id: int) -> None:
    """Point the crate at its greatest non-yanked, non-prerelease release."""
    releases = session.query(Release).filter(Release.crate_id == crate_id).all()
    crate = session.get(Crate, crate_id)
    latest = pick_latest(releases, lambda r: r.version, lambda r: bool(r.yanked))
    crate.latest_version_id = latest.id if latest is not None else None


def add_package(
    package: Package,
    *,
    doc_targets: Sequence[str] = (),
    default_target: Optional[str] = None,
    build_status: bool = True,
    rustc_version: str = "",
    docsrs_version: str = "",
    output: Optional[str] = None,
    yanked: bool = False,
    doc_coverage: Optional[DocCoverageCounts] = None,
    repository_stats: Optional[RepositoryStats] = None,
    files: Iterable[Blob] = (),
    release_time: Optional[datetime.datetime] = None,
    storage: Optional[Storage] = None,
) -> int:
    """Insert or refresh one release; returns the release id."""
    if blacklist_service.is_blacklisted(package.name):
        raise CrateBlacklistedError(package.name)
    blobs = list(files)
    with app_session() as session:
        crate = _upsert_crate(session, package.name)
        release = (
            session.query(Release)
            .filter(Release.crate_id == crate.id, Release.version == package.version)
            .one_or_none()
        )
        if release is None:
            release = Release(crate_id=crate.id, version=package.version)
            session.add(release)
        release.release_time = release_time or datetime.datetime.utcnow()
        release.description = package.description
        release.license = package.license
        release.homepage_url = package.homepage
        release.documentation_url = package.documentation
        release.repository_url = package.repository
        release.repository_id = _upsert_repository(session, package.repository, repository_stats)
        release.target_name = package.package_name()
        release.default_target = default_target or (doc_targets[0] if doc_targets else None)
        release.doc_targets = json.dumps(list(doc_targets))
        release.dependencies = json.dumps(_dependency_rows(package))
        release.is_library = package.is_library()
        release.build_status = bool(build_status)
        release.rustdoc_status = bool(build_status) and bool(blobs)
        release.yanked = bool(yanked)
        session.flush()
        release_id = int(release.id)

        _replace_authors(session, release_id, package.authors)
        _replace_keywords(session, release_id, package.keywords)
        _store_doc_coverage(session, release_id, doc_coverage)
        _store_compression(session, release_id, blobs)
        session.add(
            Build(
                rid=release_id,
                rustc_version=rustc_version,
                docsrs_version=docsrs_version,
                build_status=bool(build_status),
                output=output,
            )
        )
        session.flush()
        update_latest_version_id(session, crate.id)
    if blobs:
        (storage or Storage()).store_blobs(blobs)
    LOG.info(
        "Release imported name=%s version=%s build_status=%s files=%s",
        package.name,
        package.version,
        build_status,
        len(blobs),
    )
    return release_id


def yank(name: str, version: str, yanked: bool = True) -> None:
    with app_session() as session:
        release = (
            session.query(Release)
            .join(Crate, Crate.id == Release.crate_id)
            .filter(Crate.name == name, Release.version == version)
            .one_or_none()
        )
        if release is None:
            raise ReleaseNotFoundError(name, version)
        release.yanked = bool(yanked)
        session.flush()
        update_latest_version_id(session, release.crate_id)
    LOG.info("Release yanked=%s name=%s version=%s", yanked, name, version)


__all__ = [
    "ReleaseImportError",
    "CrateBlacklistedError",
    "ReleaseNotFoundError",
    "DocCoverageCounts",
    "RepositoryStats",
    "slugify",
    "parse_author",
    "add_package",
    "yank",
    "update_latest_version_id",
]
