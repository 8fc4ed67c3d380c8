"""Tests for delete_service crate and version removal."""
from __future__ import annotations

import pytest

from docshost.db import app_session
from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.db.models import AuthorRel, Build, Crate, DocCoverage, KeywordRel, Release, SandboxOverride
from docshost.services import delete_service, limits_service
from docshost.services.delete_service import MissingCrateError, MissingVersionError
from docshost.services.release_service import DocCoverageCounts
from docshost.storage import Blob, Storage
from tests.factories import add_release


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _blob(path: str) -> Blob:
    return Blob(path=path, mime="text/html", content=b"<html><body>docs</body></html>")


def _release_ids(name: str) -> list:
    with app_session() as session:
        rows = (
            session.query(Release.id)
            .join(Crate, Crate.id == Release.crate_id)
            .filter(Crate.name == name)
            .all()
        )
        return [row.id for row in rows]


def _count(model, column, ids) -> int:
    with app_session() as session:
        return session.query(model).filter(column.in_(ids)).count()


def _latest_version(name: str):
    with app_session() as session:
        crate = session.query(Crate).filter(Crate.name == name).one()
        if crate.latest_version_id is None:
            return None
        return session.get(Release, crate.latest_version_id).version


def _add(name: str, version: str, **kwargs) -> int:
    return add_release(
        name,
        version,
        authors=["Jane Doe"],
        keywords=["kw"],
        doc_coverage=DocCoverageCounts(total_items=2, documented_items=1),
        files=[_blob(f"rustdoc/{name}/{version}/{name}/index.html"), _blob(f"sources/{name}/{version}/src/lib.rs")],
        **kwargs,
    )


def test_delete_crate_removes_rows_and_files():
    _add("package-1", "1.0.0")
    _add("package-1", "2.0.0")
    _add("package-2", "1.0.0")
    limits_service.set_override("package-1", max_targets=2)
    ids = _release_ids("package-1")
    storage = Storage()

    delete_service.delete_crate("package-1", storage=storage)

    assert _release_ids("package-1") == []
    for model, column in (
        (AuthorRel, AuthorRel.rid),
        (KeywordRel, KeywordRel.rid),
        (Build, Build.rid),
        (DocCoverage, DocCoverage.release_id),
    ):
        assert _count(model, column, ids) == 0
    with app_session() as session:
        assert session.get(SandboxOverride, "package-1") is None
    assert not storage.exists("rustdoc/package-1/1.0.0/package-1/index.html")
    assert not storage.exists("sources/package-1/2.0.0/src/lib.rs")
    assert storage.exists("rustdoc/package-2/1.0.0/package-2/index.html")
    assert len(_release_ids("package-2")) == 1


def test_delete_crate_prefix_does_not_touch_similar_names():
    _add("foo", "1.0.0")
    _add("foo-bar", "1.0.0")
    storage = Storage()

    delete_service.delete_crate("foo", storage=storage)

    assert storage.exists("rustdoc/foo-bar/1.0.0/foo-bar/index.html")


def test_delete_missing_crate_raises():
    with pytest.raises(MissingCrateError, match="crate is missing: nope"):
        delete_service.delete_crate("nope")


def test_delete_version_keeps_other_versions_and_updates_latest():
    _add("a", "1.0.0")
    _add("a", "2.0.0")
    storage = Storage()
    assert _latest_version("a") == "2.0.0"

    delete_service.delete_version("a", "2.0.0", storage=storage)

    assert len(_release_ids("a")) == 1
    assert _latest_version("a") == "1.0.0"
    assert not storage.exists("rustdoc/a/2.0.0/a/index.html")
    assert storage.exists("rustdoc/a/1.0.0/a/index.html")
    assert storage.exists("sources/a/1.0.0/src/lib.rs")


def test_delete_last_version_clears_latest():
    _add("solo", "0.1.0")

    delete_service.delete_version("solo", "0.1.0")

    assert _latest_version("solo") is None


def test_delete_missing_version_raises():
    _add("a", "1.0.0")

    with pytest.raises(MissingVersionError):
        delete_service.delete_version("a", "3.0.0")
    with pytest.raises(MissingCrateError):
        delete_service.delete_version("b", "1.0.0")
