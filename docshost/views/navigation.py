"""Crate navigation header: read-only view-model and its render function.

The header is a projection of a `NavigationView` onto
``templates/crate/navigation.html``. Views are frozen dataclasses holding
tuples, so nothing can be changed while a page renders. `from_mapping`
accepts loosely-shaped data (e.g. decoded JSON) and substitutes empty
defaults for any optional field that is missing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from flask import render_template
from markupsafe import Markup

from docshost.utils.logging import get_logger
from docshost.utils.versions import is_prerelease as _is_prerelease

LOG = get_logger("views.navigation")

NAV_TEMPLATE = "crate/navigation.html"


@dataclass(frozen=True)
class Author:
    name: str
    slug: str


@dataclass(frozen=True)
class Dependency:
    name: str
    version: str
    kind: str = "normal"


@dataclass(frozen=True)
class SourceStats:
    stars: int = 0
    forks: int = 0
    issues: int = 0


@dataclass(frozen=True)
class ReleaseItem:
    version: str
    build_status: bool = True
    yanked: bool = False
    is_library: bool = True


@dataclass(frozen=True)
class GlobalAlert:
    text: str
    url: str = ""
    css_class: str = "error"
    fa_icon: str = "exclamation-triangle"


@dataclass(frozen=True)
class PackageView:
    name: str
    version: str
    description: str = ""
    license: str = ""
    homepage_url: str = ""
    documentation_url: str = ""
    repository_url: Optional[str] = None
    source_stats: Optional[SourceStats] = None
    authors: Tuple[Author, ...] = ()
    dependencies: Tuple[Dependency, ...] = ()
    releases: Tuple[ReleaseItem, ...] = ()
    keywords: Tuple[str, ...] = ()
    documented_items: Optional[int] = None
    total_items: Optional[int] = None
    doc_targets: Tuple[str, ...] = ()
    default_target: Optional[str] = None

    @property
    def doc_coverage_percent(self) -> Optional[float]:
        if self.documented_items is None or not self.total_items:
            return None
        return round(self.documented_items * 100 / self.total_items, 2)


@dataclass(frozen=True)
class PageContext:
    is_latest_version: bool = True
    is_prerelease: bool = False
    yanked: bool = False
    latest_path: str = ""
    latest_version: str = ""
    inner_path: str = ""

    @property
    def show_warning(self) -> bool:
        return self.yanked or not self.is_latest_version


@dataclass(frozen=True)
class NavigationView:
    package: PackageView
    page: PageContext = field(default_factory=PageContext)
    alert: Optional[GlobalAlert] = None

    def template_context(self) -> Dict[str, Any]:
        return {"package": self.package, "page": self.page, "alert": self.alert}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NavigationView":
        """Build a view from flat keys; only ``name`` and ``version`` are required."""
        name = str(data["name"])
        version = str(data["version"])
        package = PackageView(
            name=name,
            version=version,
            description=_text(data.get("description")),
            license=_text(data.get("license")),
            homepage_url=_text(data.get("homepage_url")),
            documentation_url=_text(data.get("documentation_url")),
            repository_url=data.get("repository_url") or None,
            source_stats=_source_stats(data.get("source_stats")),
            authors=_entries(_author, data.get("authors")),
            dependencies=_entries(_dependency, data.get("dependencies")),
            releases=_entries(_release, data.get("releases")),
            keywords=tuple(str(k) for k in _items(data.get("keywords")) if k is not None),
            documented_items=_optional_int(data.get("documented_items")),
            total_items=_optional_int(data.get("total_items")),
            doc_targets=tuple(str(t) for t in _items(data.get("doc_targets"))),
            default_target=data.get("default_target") or None,
        )
        latest_version = _text(data.get("latest_version"))
        is_latest_version = data.get("is_latest_version")
        is_prerelease = data.get("is_prerelease")
        page = PageContext(
            is_latest_version=True if is_latest_version is None else bool(is_latest_version),
            is_prerelease=_is_prerelease(version) if is_prerelease is None else bool(is_prerelease),
            yanked=bool(data.get("yanked", False)),
            latest_path=_text(data.get("latest_path")),
            latest_version=latest_version,
            inner_path=_text(data.get("inner_path")),
        )
        alert_data = data.get("alert")
        alert = None
        if isinstance(alert_data, Mapping) and alert_data.get("text"):
            alert = GlobalAlert(
                text=str(alert_data["text"]),
                url=_text(alert_data.get("url")),
                css_class=_text(alert_data.get("css_class")) or "error",
                fa_icon=_text(alert_data.get("fa_icon")) or "exclamation-triangle",
            )
        return cls(package=package, page=page, alert=alert)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _items(value: Any) -> Iterable[Any]:
    if value is None or isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        return ()
    return value


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _source_stats(value: Any) -> Optional[SourceStats]:
    if not isinstance(value, Mapping):
        return None
    return SourceStats(
        stars=_optional_int(value.get("stars")) or 0,
        forks=_optional_int(value.get("forks")) or 0,
        issues=_optional_int(value.get("issues")) or 0,
    )


def _entries(convert, value: Any) -> tuple:
    """Convert each entry, dropping the ones ``convert`` cannot read."""
    converted = []
    for entry in _items(value):
        item = convert(entry)
        if item is None:
            LOG.debug("Skipping malformed %s entry %r", convert.__name__.lstrip("_"), entry)
            continue
        converted.append(item)
    return tuple(converted)


def _author(value: Any) -> Optional[Author]:
    if isinstance(value, Author):
        return value
    if isinstance(value, str):
        return Author(name=value, slug=value)
    if isinstance(value, Mapping):
        name = _text(value.get("name"))
        return Author(name=name, slug=_text(value.get("slug")) or name)
    if not isinstance(value, (list, tuple)) or not value:
        return None
    name, slug = (list(value) + ["", ""])[:2]
    return Author(name=_text(name), slug=_text(slug) or _text(name))


def _dependency(value: Any) -> Optional[Dependency]:
    if isinstance(value, Dependency):
        return value
    if isinstance(value, str):
        return Dependency(name=value, version="")
    if isinstance(value, Mapping):
        return Dependency(
            name=_text(value.get("name")),
            version=_text(value.get("version")),
            kind=_text(value.get("kind")) or "normal",
        )
    if not isinstance(value, (list, tuple)) or not value:
        return None
    name, version, kind = (list(value) + ["", "", ""])[:3]
    return Dependency(name=_text(name), version=_text(version), kind=_text(kind) or "normal")


def _release(value: Any) -> Optional[ReleaseItem]:
    if isinstance(value, ReleaseItem):
        return value
    if isinstance(value, Mapping):
        return ReleaseItem(
            version=_text(value.get("version")),
            build_status=bool(value.get("build_status", True)),
            yanked=bool(value.get("yanked", False)),
            is_library=bool(value.get("is_library", True)),
        )
    if value is None:
        return None
    return ReleaseItem(version=_text(value))


def render_navigation(view: NavigationView) -> Markup:
    """Render the header fragment; needs an active Flask app context."""
    return Markup(render_template(NAV_TEMPLATE, **view.template_context()))


__all__ = [
    "NAV_TEMPLATE",
    "Author",
    "Dependency",
    "SourceStats",
    "ReleaseItem",
    "GlobalAlert",
    "PackageView",
    "PageContext",
    "NavigationView",
    "render_navigation",
]
