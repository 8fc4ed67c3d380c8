"""Tests for the database storage backend using in-memory SQLite."""
from __future__ import annotations

import pytest

from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.storage import Blob, PathNotFoundError, SizeLimitReachedError, Storage, detect_mime
from docshost.storage.database import escape_like


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_store_and_get_roundtrip_metadata():
    storage = Storage()
    storage.store_one("rustdoc/foo/1.0.0/foo/index.html", b"<html></html>")

    blob = storage.get("rustdoc/foo/1.0.0/foo/index.html", max_size=1024)

    assert blob.mime == "text/html"
    assert blob.content == b"<html></html>"
    assert blob.date_updated is not None


def test_store_batch_overwrites_existing_paths():
    storage = Storage()
    storage.store_blobs([Blob(path="a.txt", mime="text/plain", content=b"one")])
    storage.store_blobs([Blob(path="a.txt", mime="text/plain", content=b"two", compression=1)])

    blob = storage.get("a.txt", max_size=10)

    assert blob.content == b"two"
    assert blob.compression == 1


def test_missing_path_raises():
    with pytest.raises(PathNotFoundError):
        Storage().get("nope", max_size=10)
    assert Storage().exists("nope") is False


def test_size_limit_is_enforced():
    storage = Storage()
    storage.store_one("big.bin", b"x" * 100, mime="application/octet-stream")

    with pytest.raises(SizeLimitReachedError):
        storage.get("big.bin", max_size=99)
    assert len(storage.get("big.bin", max_size=100).content) == 100


def test_delete_prefix_treats_wildcards_literally():
    storage = Storage()
    storage.store_blobs(
        [
            Blob(path="rustdoc/a_b/1.0/x.html", mime="text/html", content=b"1"),
            Blob(path="rustdoc/axb/1.0/x.html", mime="text/html", content=b"2"),
            Blob(path="rustdoc/a%b/1.0/x.html", mime="text/html", content=b"3"),
        ]
    )

    assert storage.delete_prefix("rustdoc/a_b/") == 1
    assert storage.exists("rustdoc/axb/1.0/x.html")
    assert storage.exists("rustdoc/a%b/1.0/x.html")
    assert storage.list_prefix("rustdoc/") == ["rustdoc/a%b/1.0/x.html", "rustdoc/axb/1.0/x.html"]


def test_escape_like():
    assert escape_like("a_b%c\\d") == "a\\_b\\%c\\\\d"


def test_detect_mime():
    assert detect_mime("search-index.js") == "application/javascript"
    assert detect_mime("style.css") == "text/css"
    assert detect_mime("Cargo.lock") == "text/plain"


def test_list_prefix_is_case_sensitive():
    storage = Storage()
    storage.store_blobs(
        [
            Blob(path="rustdoc/Foo/1.0/index.html", mime="text/html", content=b"a"),
            Blob(path="rustdoc/foo/1.0/index.html", mime="text/html", content=b"b"),
        ]
    )

    assert storage.list_prefix("rustdoc/foo/") == ["rustdoc/foo/1.0/index.html"]
