"""Tests for cargo metadata parsing."""
from __future__ import annotations

import json
import subprocess
from types import SimpleNamespace

import pytest

from docshost.utils import cargo_metadata
from docshost.utils.cargo_metadata import CargoMetadata, CargoMetadataError, Package, Target


def _metadata_json(**package_overrides) -> str:
    root = {
        "id": "my-crate 0.3.1 (path+file:///src)",
        "name": "my-crate",
        "version": "0.3.1",
        "license": "MIT",
        "repository": "https://github.com/example/my-crate",
        "description": "Example crate",
        "authors": ["Jane Doe <jane@example.com>"],
        "keywords": ["example"],
        "dependencies": [
            {"name": "serde", "req": "^1.0", "kind": None, "optional": False},
            {"name": "cc", "req": "^1", "kind": "build"},
        ],
        "targets": [
            {"name": "my-crate", "crate_types": ["lib"], "src_path": "/src/lib.rs"},
            {"name": "my-tool", "crate_types": ["bin"], "src_path": "/src/main.rs"},
        ],
    }
    root.update(package_overrides)
    other = {"id": "serde 1.0.0", "name": "serde", "version": "1.0.0"}
    return json.dumps({"packages": [other, root], "resolve": {"root": root["id"]}})


def test_parse_selects_root_package():
    package = CargoMetadata.parse(_metadata_json()).root()

    assert package.name == "my-crate"
    assert package.version == "0.3.1"
    assert [d.name for d in package.dependencies] == ["serde", "cc"]
    assert package.dependencies[0].kind is None
    assert package.dependencies[1].kind == "build"
    assert package.authors == ["Jane Doe <jane@example.com>"]


def test_parse_requires_resolve_metadata():
    document = json.loads(_metadata_json())
    document["resolve"] = None

    with pytest.raises(CargoMetadataError, match="expected resolve metadata"):
        CargoMetadata.parse(json.dumps(document))


def test_parse_rejects_invalid_json():
    with pytest.raises(CargoMetadataError):
        CargoMetadata.parse("{not json")


def test_library_detection_and_names():
    package = CargoMetadata.parse(_metadata_json()).root()

    assert package.is_library()
    assert package.library_target().name == "my-crate"
    assert package.library_name() == "my_crate"
    assert package.package_name() == "my_crate"


def test_binary_only_package_uses_first_target_name():
    package = Package(
        id="tool",
        name="cool-tool",
        version="1.0.0",
        targets=[Target(name="cool-tool-cli", crate_types=["bin"])],
    )

    assert not package.is_library()
    assert package.library_name() is None
    assert package.package_name() == "cool_tool_cli"


def test_proc_macro_counts_as_library():
    package = Package(
        id="m",
        name="my-macros",
        version="0.1.0",
        targets=[Target(name="my-macros", crate_types=["proc-macro"])],
    )

    assert package.is_library()


def test_dummy_lib_target():
    target = Target.dummy_lib("dummy", "src/lib.rs")

    assert target.crate_types == ["lib"]
    assert target.src_path == "src/lib.rs"


def test_load_runs_cargo_in_source_dir(monkeypatch, tmp_path):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs["cwd"]))
        return SimpleNamespace(returncode=0, stdout=_metadata_json(), stderr="")

    monkeypatch.setattr(cargo_metadata.subprocess, "run", fake_run)

    metadata = CargoMetadata.load(tmp_path)

    assert metadata.root().name == "my-crate"
    assert calls == [(["cargo", "metadata", "--format-version", "1"], str(tmp_path))]


def test_load_reports_cargo_failure(monkeypatch, tmp_path):
    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 101, stdout="", stderr="error: could not find Cargo.toml")

    monkeypatch.setattr(cargo_metadata.subprocess, "run", fake_run)

    with pytest.raises(CargoMetadataError, match="could not find Cargo.toml"):
        CargoMetadata.load(tmp_path)
