"""Command line interface tests."""
from __future__ import annotations

import json

import pytest

from docshost.cli import build_parser, main
from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.services import blacklist_service, consistency_service, queue_service
from docshost.storage import Storage
from tests.factories import add_release


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _last_line(out: str) -> str:
    return out.strip().splitlines()[-1]


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_blacklist_add_list_remove(capsys):
    assert main(["database", "blacklist", "add", "bad-crate"]) == 0
    assert main(["database", "blacklist", "list"]) == 0
    assert "bad-crate" in capsys.readouterr().out

    assert main(["database", "blacklist", "remove", "bad-crate"]) == 0
    assert blacklist_service.list_crates() == []


def test_blacklist_duplicate_reports_error(capsys):
    main(["database", "blacklist", "add", "bad-crate"])

    assert main(["database", "blacklist", "add", "bad-crate"]) == 1
    assert "error:" in capsys.readouterr().err


def test_queue_priorities(capsys):
    assert main(["queue", "set-priority", "serde%", "7"]) == 0
    assert main(["queue", "get-priority", "serde-json"]) == 0
    assert _last_line(capsys.readouterr().out) == "7"

    assert main(["queue", "remove-priority", "serde%"]) == 0
    assert "removed priority 7" in capsys.readouterr().out
    assert queue_service.get_crate_priority("serde-json") == 0


def test_limits_set_and_show(capsys):
    assert main(["limits", "set", "big-crate", "--timeout", "1800"]) == 0
    stored = json.loads(_last_line(capsys.readouterr().out))
    assert stored["timeout"] == 1800
    assert stored["targets"] == 1

    assert main(["limits", "remove", "big-crate"]) == 0
    assert json.loads(_last_line(capsys.readouterr().out))["timeout"] == 15 * 60


def test_limits_remove_without_override(capsys):
    assert main(["limits", "remove", "nothing"]) == 0
    assert "no override stored for nothing" in capsys.readouterr().out


def test_add_release_imports_metadata_and_files(tmp_path, capsys):
    package = {
        "id": "my-crate 0.3.1",
        "name": "my-crate",
        "version": "0.3.1",
        "license": "MIT",
        "targets": [{"name": "my_crate", "crate_types": ["lib"]}],
    }
    metadata = tmp_path / "metadata.json"
    metadata.write_text(json.dumps({"packages": [package], "resolve": {"root": package["id"]}}))
    docs = tmp_path / "doc" / "my_crate"
    docs.mkdir(parents=True)
    (docs / "index.html").write_text("<html><body></body></html>")

    code = main(
        [
            "database",
            "add-release",
            str(metadata),
            "--doc-target",
            "x86_64-unknown-linux-gnu",
            "--docs-dir",
            str(tmp_path / "doc"),
        ]
    )

    assert code == 0
    assert "my-crate 0.3.1 stored as release" in capsys.readouterr().out
    assert consistency_service.load() == {"my-crate": ["0.3.1"]}
    assert Storage().exists("rustdoc/my-crate/0.3.1/my_crate/index.html")


def test_add_release_rejects_bad_metadata(tmp_path, capsys):
    metadata = tmp_path / "metadata.json"
    metadata.write_text("{}")

    assert main(["database", "add-release", str(metadata)]) == 1
    assert "expected resolve metadata" in capsys.readouterr().err


def test_dump_releases_and_delete(capsys):
    add_release("foo", "1.0.0")
    add_release("foo", "1.1.0")

    assert main(["database", "dump-releases"]) == 0
    assert json.loads(capsys.readouterr().out) == {"foo": ["1.0.0", "1.1.0"]}

    assert main(["database", "delete", "version", "foo", "1.0.0"]) == 0
    assert consistency_service.load() == {"foo": ["1.1.0"]}

    assert main(["database", "delete", "crate", "foo"]) == 0
    assert consistency_service.load() == {}


def test_delete_missing_crate_reports_error(capsys):
    assert main(["database", "delete", "crate", "ghost"]) == 1
    assert "ghost" in capsys.readouterr().err


def test_yank_and_unyank(capsys):
    add_release("foo", "1.0.0")

    assert main(["database", "yank", "foo", "1.0.0"]) == 0
    assert main(["database", "yank", "foo", "1.0.0", "--unyank"]) == 0
    assert main(["database", "yank", "foo", "9.9.9"]) == 1
