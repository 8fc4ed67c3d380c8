"""Stored documentation and source pages, with the navigation header injected.

Rustdoc output is stored verbatim under ``rustdoc/NAME/VERSION/``; the
header is rendered per request and spliced in right after the opening
``<body>`` tag so the stored files never need rewriting.
"""
from __future__ import annotations

import re
from typing import Any, List

from flask import Blueprint, Response, redirect, render_template

from docshost.config import max_file_size
from docshost.routes.crate_pages import storage_key
from docshost.services import crate_details_service
from docshost.storage import Storage
from docshost.utils.logging import get_logger
from docshost.views.helpers import crate_url, rustdoc_url
from docshost.views.navigation import render_navigation

LOG = get_logger("rustdoc")

bp = Blueprint("rustdoc", __name__)

INJECT_MARKER = b'id="crate-navigation"'
_BODY_OPEN_RE = re.compile(rb"<body\b[^>]*>", re.IGNORECASE)
_TEXT_MIMES = ("application/json", "application/javascript", "application/toml")


def inject_navigation(body: bytes, header: str) -> bytes:
    """Insert ``header`` after the first ``<body ...>`` tag; no-op if absent."""
    if INJECT_MARKER in body:
        LOG.debug("navigation skip: already_present")
        return body
    match = _BODY_OPEN_RE.search(body)
    if match is None:
        LOG.debug("navigation skip: body_tag_missing")
        return body
    insertion_point = match.end()
    return body[:insertion_point] + header.encode("utf-8") + body[insertion_point:]


def strip_target(summary: dict, inner_path: str) -> str:
    """Path inside the crate docs with any non-default target segment removed."""
    head, sep, rest = inner_path.partition("/")
    if sep and head in summary["doc_targets"] and head != summary["default_target"]:
        return rest
    return inner_path


def directory_entries(paths: List[str], prefix: str) -> List[str]:
    """Immediate children of ``prefix``; directories end with ``/`` and sort first."""
    dirs, files = set(), set()
    for path in paths:
        if not path.startswith(prefix):
            continue
        remainder = path[len(prefix):]
        if not remainder:
            continue
        head, sep, _rest = remainder.partition("/")
        if sep:
            dirs.add(head + "/")
        else:
            files.add(head)
    return sorted(dirs) + sorted(files)


def _is_text(mime: str) -> bool:
    return mime.startswith("text/") or mime in _TEXT_MIMES


@bp.route("/<name>/<version>/", methods=["GET"])
@bp.route("/<name>/<version>/<path:inner_path>", methods=["GET"])
def rustdoc_page(name: str, version: str, inner_path: str = ""):
    summary = crate_details_service.release_summary(name, version)
    if not summary["rustdoc_status"]:
        return redirect(crate_url(name, version), code=302)
    if not inner_path:
        return redirect(rustdoc_url(name, version, f"{summary['target_name']}/"), code=302)

    blob = Storage().get(storage_key(name, summary["version"], inner_path), max_file_size())
    body = blob.content
    if blob.mime.startswith("text/html"):
        view = crate_details_service.load_navigation(
            name, version, strip_target(summary, inner_path), latest_inner_path=inner_path
        )
        body = inject_navigation(body, str(render_navigation(view)))
    resp = Response(body, mimetype=blob.mime)
    resp.last_modified = blob.date_updated
    return resp


@bp.route("/crate/<name>/<version>/source/", methods=["GET"])
@bp.route("/crate/<name>/<version>/source/<path:path>", methods=["GET"])
def source_page(name: str, version: str, path: str = ""):
    view = crate_details_service.load_navigation(name, version)
    base = f"sources/{view.package.name}/{view.package.version}/"
    storage = Storage()
    entries = None
    content = None
    if not path or path.endswith("/"):
        entries = directory_entries(storage.list_prefix(base + path), base + path)
    else:
        blob = storage.get(base + path, max_file_size())
        if not _is_text(blob.mime):
            return Response(blob.content, mimetype=blob.mime)
        content = blob.content.decode("utf-8", errors="replace")
    return render_template(
        "crate/source.html",
        view=view,
        navigation=render_navigation(view),
        path=path,
        entries=entries,
        content=content,
    )


def register_rustdoc(app: Any) -> None:
    if getattr(app, "_rustdoc_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_rustdoc_bp", bp)
    LOG.debug("rustdoc blueprint registered")


__all__ = [
    "register_rustdoc",
    "inject_navigation",
    "strip_target",
    "directory_entries",
    "bp",
]
