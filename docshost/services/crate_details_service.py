"""Assembly of the crate navigation header from the release store.

The header is rendered for one release of one crate. Everything the template
needs (metadata, authors, dependencies, other releases and whether the page is
outdated) is read in a single session and frozen into a `NavigationView`.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from docshost import config
from docshost.db import app_session
from docshost.db.models import Author as AuthorRow
from docshost.db.models import AuthorRel, Crate, DocCoverage, Keyword, KeywordRel, Release, Repository
from docshost.utils.logging import get_logger
from docshost.utils.versions import is_prerelease, pick_latest, version_sort_key
from docshost.views.helpers import latest_url
from docshost.views.navigation import (
    Author,
    Dependency,
    GlobalAlert,
    NavigationView,
    PackageView,
    PageContext,
    ReleaseItem,
    SourceStats,
)

LOG = get_logger("crate_details_service")

LATEST = "latest"


class CrateNotFoundError(LookupError):
    def __init__(self, name: str, version: Optional[str] = None):
        message = f"crate not found: {name}" if version is None else f"crate not found: {name} {version}"
        super().__init__(message)
        self.name = name
        self.version = version


def _crate(session: Session, name: str) -> Crate:
    crate = session.query(Crate).filter(Crate.name == name).one_or_none()
    if crate is None:
        raise CrateNotFoundError(name)
    return crate


def _releases(session: Session, crate_id: int) -> List[Release]:
    rows = session.query(Release).filter(Release.crate_id == crate_id).all()
    return sorted(rows, key=lambda r: version_sort_key(r.version), reverse=True)


def _latest(releases: List[Release]) -> Optional[Release]:
    return pick_latest(releases, lambda r: r.version, lambda r: bool(r.yanked))


def _select(name: str, version: str, releases: List[Release]) -> Release:
    if version == LATEST:
        selected = _latest(releases)
    else:
        selected = next((r for r in releases if r.version == version), None)
    if selected is None:
        raise CrateNotFoundError(name, version)
    return selected


def _authors(session: Session, release_id: int) -> tuple:
    rows = (
        session.query(AuthorRow.name, AuthorRow.slug)
        .join(AuthorRel, AuthorRel.aid == AuthorRow.id)
        .filter(AuthorRel.rid == release_id)
        .order_by(AuthorRel.position, AuthorRel.id)
        .all()
    )
    return tuple(Author(name=row.name, slug=row.slug) for row in rows)


def _keywords(session: Session, release_id: int) -> tuple:
    rows = (
        session.query(Keyword.name)
        .join(KeywordRel, KeywordRel.kid == Keyword.id)
        .filter(KeywordRel.rid == release_id)
        .order_by(KeywordRel.id)
        .all()
    )
    return tuple(row.name for row in rows)


def _dependencies(release: Release) -> tuple:
    deps = []
    for entry in release.dependencies_list():
        if not isinstance(entry, list) or len(entry) < 2:
            LOG.debug("Skipping malformed dependency entry release_id=%s entry=%r", release.id, entry)
            continue
        kind = entry[2] if len(entry) > 2 and entry[2] else "normal"
        deps.append(Dependency(name=str(entry[0]), version=str(entry[1]), kind=str(kind)))
    return tuple(deps)


def _source_stats(session: Session, release: Release) -> Optional[SourceStats]:
    if release.repository_id is None:
        return None
    repo = session.get(Repository, release.repository_id)
    if repo is None:
        return None
    return SourceStats(stars=repo.stars or 0, forks=repo.forks or 0, issues=repo.issues or 0)


def _alert() -> Optional[GlobalAlert]:
    data = config.global_alert()
    if not data:
        return None
    return GlobalAlert(
        text=data["text"],
        url=data["url"],
        css_class=data["css_class"],
        fa_icon=data["fa_icon"],
    )


def resolve_version(name: str, version: str) -> str:
    """Concrete version for ``version`` (which may be ``latest``)."""
    with app_session() as session:
        crate = _crate(session, name)
        return _select(name, version, _releases(session, crate.id)).version


def release_summary(name: str, version: str) -> dict:
    """Routing data for one release; ``version`` may be ``latest``."""
    with app_session() as session:
        crate = _crate(session, name)
        release = _select(name, version, _releases(session, crate.id))
        return {
            "id": release.id,
            "name": crate.name,
            "version": release.version,
            "target_name": release.target_name or crate.name.replace("-", "_"),
            "default_target": release.default_target,
            "doc_targets": release.doc_targets_list(),
            "rustdoc_status": bool(release.rustdoc_status),
        }


def load_navigation(
    name: str,
    version: str,
    inner_path: str = "",
    latest_inner_path: Optional[str] = None,
) -> NavigationView:
    """Header for one release.

    ``inner_path`` is the page path without any target segment and feeds the
    platform links; ``latest_inner_path`` (defaulting to ``inner_path``) is
    the path kept when linking to the latest version.
    """
    with app_session() as session:
        crate = _crate(session, name)
        releases = _releases(session, crate.id)
        release = _select(name, version, releases)
        latest = _latest(releases)
        coverage = session.query(DocCoverage).filter(DocCoverage.release_id == release.id).one_or_none()

        package = PackageView(
            name=crate.name,
            version=release.version,
            description=release.description or "",
            license=release.license or "",
            homepage_url=release.homepage_url or "",
            documentation_url=release.documentation_url or "",
            repository_url=release.repository_url or None,
            source_stats=_source_stats(session, release),
            authors=_authors(session, release.id),
            dependencies=_dependencies(release),
            releases=tuple(
                ReleaseItem(
                    version=r.version,
                    build_status=bool(r.build_status),
                    yanked=bool(r.yanked),
                    is_library=bool(r.is_library),
                )
                for r in releases
            ),
            keywords=_keywords(session, release.id),
            documented_items=coverage.documented_items if coverage is not None else None,
            total_items=coverage.total_items if coverage is not None else None,
            doc_targets=tuple(release.doc_targets_list()),
            default_target=release.default_target,
        )
        latest_version = latest.version if latest is not None else release.version
        page = PageContext(
            is_latest_version=release.id == (latest.id if latest is not None else release.id),
            is_prerelease=is_prerelease(release.version),
            yanked=bool(release.yanked),
            latest_path=latest_url(
                crate.name,
                latest_version,
                inner_path if latest_inner_path is None else latest_inner_path,
            ),
            latest_version=latest_version,
            inner_path=inner_path or "",
        )
    return NavigationView(package=package, page=page, alert=_alert())


__all__ = [
    "LATEST",
    "CrateNotFoundError",
    "load_navigation",
    "release_summary",
    "resolve_version",
]
