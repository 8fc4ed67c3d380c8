"""Builders for release fixtures shared by database-backed tests."""
from __future__ import annotations

import datetime
from typing import Iterable, Optional, Sequence

from docshost.services import release_service
from docshost.services.release_service import DocCoverageCounts, RepositoryStats
from docshost.storage import Blob
from docshost.utils.cargo_metadata import Dependency, Package, Target


def make_package(
    name: str,
    version: str,
    *,
    authors: Sequence[str] = (),
    keywords: Sequence[str] = (),
    dependencies: Sequence[Dependency] = (),
    crate_types: Sequence[str] = ("lib",),
    repository: Optional[str] = None,
    description: Optional[str] = None,
) -> Package:
    return Package(
        id=f"{name} {version}",
        name=name,
        version=version,
        license="MIT",
        repository=repository,
        description=description,
        dependencies=list(dependencies),
        targets=[Target(name=name, crate_types=list(crate_types))],
        keywords=list(keywords),
        authors=list(authors),
    )


def add_release(
    name: str,
    version: str,
    *,
    yanked: bool = False,
    build_status: bool = True,
    doc_targets: Sequence[str] = (),
    default_target: Optional[str] = None,
    files: Iterable[Blob] = (),
    release_time: Optional[datetime.datetime] = None,
    doc_coverage: Optional[DocCoverageCounts] = None,
    repository_stats: Optional[RepositoryStats] = None,
    **package_kwargs,
) -> int:
    return release_service.add_package(
        make_package(name, version, **package_kwargs),
        doc_targets=doc_targets,
        default_target=default_target,
        build_status=build_status,
        rustc_version="rustc 1.80.0",
        docsrs_version="docshost 0.4.0",
        output="build log",
        yanked=yanked,
        doc_coverage=doc_coverage,
        repository_stats=repository_stats,
        files=files,
        release_time=release_time,
    )
