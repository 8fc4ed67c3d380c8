"""Semantic version helpers used when ordering crate releases."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    pre: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    def precedence_key(self) -> tuple:
        # A release without pre-release identifiers ranks above any pre-release
        # of the same core version; numeric identifiers rank below alphanumeric.
        if not self.pre:
            pre_key: tuple = ((1,),)
        else:
            pre_key = tuple(
                (0, int(part), "") if part.isdigit() else (1, 0, part)
                for part in self.pre
            )
            pre_key = ((0,),) + pre_key
        return (self.major, self.minor, self.patch, pre_key)


def parse_version(value: str) -> Optional[SemVer]:
    match = _SEMVER_RE.match((value or "").strip())
    if not match:
        return None
    pre = match.group("pre")
    build = match.group("build")
    return SemVer(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        pre=tuple(pre.split(".")) if pre else (),
        build=tuple(build.split(".")) if build else (),
    )


def is_prerelease(value: str) -> bool:
    parsed = parse_version(value)
    return bool(parsed and parsed.is_prerelease)


def version_sort_key(value: str) -> tuple:
    """Ascending sort key; unparsable versions sort lowest, by string."""
    parsed = parse_version(value)
    if parsed is None:
        return (0, (), value or "")
    return (1, parsed.precedence_key(), value)


def sort_versions_desc(values: Iterable[str]) -> List[str]:
    return sorted(values, key=version_sort_key, reverse=True)


def pick_latest(items: Iterable[T], version_of: Callable[[T], str], yanked_of: Callable[[T], bool]) -> Optional[T]:
    """Greatest non-yanked stable item, else greatest non-yanked, else greatest."""
    ordered = sorted(items, key=lambda item: version_sort_key(version_of(item)), reverse=True)
    stable = [i for i in ordered if not yanked_of(i) and not is_prerelease(version_of(i))]
    unyanked = [i for i in ordered if not yanked_of(i)]
    candidates = stable or unyanked or ordered
    return candidates[0] if candidates else None


__all__ = [
    "SemVer",
    "parse_version",
    "is_prerelease",
    "version_sort_key",
    "sort_versions_desc",
    "pick_latest",
]
