"""Presentational helpers exposed to templates (icons, URL composition)."""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from markupsafe import Markup

from docshost.utils.logging import get_logger

LOG = get_logger("views.helpers")

_ICON_KINDS = {"solid": "fa-solid", "regular": "fa-regular", "brands": "fa-brands"}


def fa_icon(name: str, kind: str = "solid", fw: bool = False, extra: str = "") -> Markup:
    """Font Awesome icon markup; ``kind`` is solid, regular or brands."""
    classes = ["fa", _ICON_KINDS.get(kind, "fa-solid"), f"fa-{name}"]
    if fw:
        classes.append("fa-fw")
    if extra:
        classes.append(extra)
    return Markup('<span class="{0}" aria-hidden="true"></span>').format(" ".join(classes))


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _inner(inner_path: Optional[str]) -> str:
    if not inner_path:
        return ""
    return quote(inner_path.lstrip("/"), safe="/#?=&")


def crate_url(name: str, version: Optional[str] = None) -> str:
    if not version:
        return f"/crate/{_segment(name)}"
    return f"/crate/{_segment(name)}/{_segment(version)}"


def builds_url(name: str, version: str, build_id: Optional[int] = None) -> str:
    base = f"{crate_url(name, version)}/builds"
    return base if build_id is None else f"{base}/{int(build_id)}"


def rustdoc_url(name: str, version: str, inner_path: str = "") -> str:
    return f"/{_segment(name)}/{_segment(version)}/{_inner(inner_path)}"


def source_url(name: str, version: str, path: str = "") -> str:
    return f"{crate_url(name, version)}/source/{_inner(path)}"


def target_redirect_url(name: str, version: str, target: str, inner_path: str = "") -> str:
    return f"{crate_url(name, version)}/target-redirect/{_segment(target)}/{_inner(inner_path)}"


def latest_url(name: str, latest_version: str, inner_path: str = "") -> str:
    if inner_path:
        return rustdoc_url(name, latest_version, inner_path)
    return crate_url(name, latest_version)


def author_url(slug: str) -> str:
    return f"/releases/{_segment(slug)}"


def crates_io_url(name: str) -> str:
    return f"https://crates.io/crates/{_segment(name)}"


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:g}"


def register_template_helpers(app: Any) -> None:
    env = getattr(app, "jinja_env", None)
    if env is None:
        return
    if env.globals.get("fa_icon") is fa_icon:
        return
    env.globals.update(
        fa_icon=fa_icon,
        crate_url=crate_url,
        builds_url=builds_url,
        rustdoc_url=rustdoc_url,
        source_url=source_url,
        target_redirect_url=target_redirect_url,
        latest_url=latest_url,
        author_url=author_url,
        crates_io_url=crates_io_url,
    )
    env.filters["percent"] = format_percent
    LOG.debug("template helpers registered")


__all__ = [
    "fa_icon",
    "crate_url",
    "builds_url",
    "rustdoc_url",
    "source_url",
    "target_redirect_url",
    "latest_url",
    "author_url",
    "crates_io_url",
    "format_percent",
    "register_template_helpers",
]
