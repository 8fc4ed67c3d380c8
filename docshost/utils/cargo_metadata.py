"""Parsing of `cargo metadata --format-version 1` output.

Only the root package of the resolved workspace is kept; it is what a
release import needs (name, version, links, dependencies, targets).
"""
from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from docshost.utils.logging import get_logger

LOG = get_logger("cargo_metadata")


class CargoMetadataError(ValueError):
    """Raised when cargo metadata output cannot be used."""


@dataclass(frozen=True)
class Target:
    name: str
    crate_types: List[str] = field(default_factory=list)
    src_path: Optional[str] = None

    @classmethod
    def dummy_lib(cls, name: str, src_path: Optional[str] = None) -> "Target":
        return cls(name=name, crate_types=["lib"], src_path=src_path)


@dataclass(frozen=True)
class Dependency:
    name: str
    req: str
    kind: Optional[str] = None
    rename: Optional[str] = None
    optional: bool = False


@dataclass(frozen=True)
class Package:
    id: str
    name: str
    version: str
    license: Optional[str] = None
    repository: Optional[str] = None
    homepage: Optional[str] = None
    description: Optional[str] = None
    documentation: Optional[str] = None
    readme: Optional[str] = None
    dependencies: List[Dependency] = field(default_factory=list)
    targets: List[Target] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    authors: List[str] = field(default_factory=list)
    features: Dict[str, List[str]] = field(default_factory=dict)

    def library_target(self) -> Optional[Target]:
        for target in self.targets:
            if any(kind != "bin" for kind in target.crate_types):
                return target
        return None

    def is_library(self) -> bool:
        return self.library_target() is not None

    @staticmethod
    def normalize_package_name(name: str) -> str:
        return name.replace("-", "_")

    def library_name(self) -> Optional[str]:
        target = self.library_target()
        if target is None:
            return None
        return self.normalize_package_name(target.name)

    def package_name(self) -> str:
        library = self.library_name()
        if library:
            return library
        if not self.targets:
            return self.normalize_package_name(self.name)
        return self.normalize_package_name(self.targets[0].name)


def _parse_dependency(raw: Dict[str, Any]) -> Dependency:
    return Dependency(
        name=str(raw.get("name") or ""),
        req=str(raw.get("req") or "*"),
        kind=raw.get("kind"),
        rename=raw.get("rename"),
        optional=bool(raw.get("optional", False)),
    )


def _parse_target(raw: Dict[str, Any]) -> Target:
    return Target(
        name=str(raw.get("name") or ""),
        crate_types=[str(kind) for kind in raw.get("crate_types") or []],
        src_path=raw.get("src_path"),
    )


def _parse_package(raw: Dict[str, Any]) -> Package:
    try:
        return Package(
            id=str(raw["id"]),
            name=str(raw["name"]),
            version=str(raw["version"]),
            license=raw.get("license"),
            repository=raw.get("repository"),
            homepage=raw.get("homepage"),
            description=raw.get("description"),
            documentation=raw.get("documentation"),
            readme=raw.get("readme"),
            dependencies=[_parse_dependency(dep) for dep in raw.get("dependencies") or []],
            targets=[_parse_target(t) for t in raw.get("targets") or []],
            keywords=[str(k) for k in raw.get("keywords") or []],
            authors=[str(a) for a in raw.get("authors") or []],
            features={str(k): list(v) for k, v in (raw.get("features") or {}).items()},
        )
    except KeyError as exc:
        raise CargoMetadataError(f"package entry missing field {exc.args[0]}") from exc


class CargoMetadata:
    def __init__(self, root: Package):
        self._root = root

    @classmethod
    def parse(cls, text: str) -> "CargoMetadata":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CargoMetadataError("invalid output returned by `cargo metadata`") from exc
        if not isinstance(document, dict):
            raise CargoMetadataError("invalid output returned by `cargo metadata`")
        resolve = document.get("resolve")
        if not resolve or not resolve.get("root"):
            raise CargoMetadataError("expected resolve metadata")
        root_id = resolve["root"]
        for raw in document.get("packages") or []:
            if raw.get("id") == root_id:
                return cls(_parse_package(raw))
        raise CargoMetadataError(f"root package {root_id} not present in packages")

    @classmethod
    def load(cls, source_dir: Path | str, cargo: str = "cargo") -> "CargoMetadata":
        LOG.debug("Running cargo metadata in %s", source_dir)
        proc = subprocess.run(
            [cargo, "metadata", "--format-version", "1"],
            cwd=str(source_dir),
            capture_output=True,
            text=True,
            check=False,
        )
        if proc.returncode != 0:
            raise CargoMetadataError(f"cargo metadata failed: {proc.stderr.strip()}")
        return cls.parse(proc.stdout)

    def root(self) -> Package:
        return self._root


__all__ = [
    "CargoMetadata",
    "CargoMetadataError",
    "Dependency",
    "Package",
    "Target",
]
