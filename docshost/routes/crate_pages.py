"""Crate details page and per-target redirects."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, redirect, render_template

from docshost.services import crate_details_service
from docshost.services.crate_details_service import LATEST
from docshost.storage import Storage
from docshost.utils.logging import get_logger
from docshost.views.helpers import crate_url, rustdoc_url
from docshost.views.navigation import render_navigation

LOG = get_logger("crate_pages")

bp = Blueprint("crate_pages", __name__)


def storage_key(name: str, version: str, inner_path: str) -> str:
    """Storage path of a rustdoc page; directories resolve to their index."""
    inner = inner_path.lstrip("/")
    if not inner or inner.endswith("/"):
        inner += "index.html"
    return f"rustdoc/{name}/{version}/{inner}"


def target_prefix(summary: dict, target: str) -> str:
    """Path segment for a target; the default target is served without one."""
    if not target or target == summary["default_target"]:
        return ""
    return f"{target}/"


@bp.route("/crate/<name>", methods=["GET"])
def crate_latest(name: str):
    version = crate_details_service.resolve_version(name, LATEST)
    return redirect(crate_url(name, version), code=302)


@bp.route("/crate/<name>/<version>", methods=["GET"])
def crate_details(name: str, version: str):
    view = crate_details_service.load_navigation(name, version)
    summary = crate_details_service.release_summary(name, version)
    return render_template(
        "crate/details.html",
        view=view,
        summary=summary,
        navigation=render_navigation(view),
    )


@bp.route("/crate/<name>/<version>/target-redirect/<target>/", methods=["GET"])
@bp.route("/crate/<name>/<version>/target-redirect/<target>/<path:inner_path>", methods=["GET"])
def target_redirect(name: str, version: str, target: str, inner_path: str = ""):
    summary = crate_details_service.release_summary(name, version)
    prefix = target_prefix(summary, target)
    storage = Storage()
    if inner_path and storage.exists(storage_key(name, summary["version"], prefix + inner_path)):
        destination = rustdoc_url(name, version, prefix + inner_path)
    else:
        # page missing on that target: fall back to the crate root
        destination = rustdoc_url(name, version, f"{prefix}{summary['target_name']}/")
    LOG.debug("target redirect name=%s version=%s target=%s -> %s", name, version, target, destination)
    return redirect(destination, code=302)


def register_crate_pages(app: Any) -> None:
    if getattr(app, "_crate_pages_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_crate_pages_bp", bp)
    LOG.debug("crate pages blueprint registered")


__all__ = ["register_crate_pages", "storage_key", "target_prefix", "bp"]
