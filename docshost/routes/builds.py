"""Build list of a release, as a page and as JSON."""
from __future__ import annotations

import datetime
from typing import Any, Optional

from flask import Blueprint, abort, jsonify, render_template
from werkzeug.http import http_date

from docshost.db.repositories import builds_repo
from docshost.services import crate_details_service, limits_service
from docshost.utils.logging import get_logger
from docshost.views.navigation import render_navigation

LOG = get_logger("builds")

bp = Blueprint("builds", __name__)


@bp.route("/crate/<name>/<version>/builds", methods=["GET"])
@bp.route("/crate/<name>/<version>/builds/<int:build_id>", methods=["GET"])
def builds_page(name: str, version: str, build_id: Optional[int] = None):
    view = crate_details_service.load_navigation(name, version)
    builds = builds_repo.list_builds(view.package.name, view.package.version)
    build = None
    if build_id is not None:
        build = next((b for b in builds if b["id"] == build_id), None)
        if build is None:
            abort(404)
    return render_template(
        "crate/builds.html",
        view=view,
        navigation=render_navigation(view),
        builds=builds,
        build=build,
        limits=limits_service.limits_for_crate(view.package.name).as_dict(),
    )


@bp.route("/crate/<name>/<version>/builds.json", methods=["GET"])
def builds_json(name: str, version: str):
    resolved = crate_details_service.resolve_version(name, version)
    builds = [
        {key: value for key, value in build.items() if key != "output"}
        for build in builds_repo.list_builds(name, resolved)
    ]
    resp = jsonify(builds)
    resp.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    resp.headers["Expires"] = http_date(datetime.datetime.now(datetime.timezone.utc))
    resp.headers["Access-Control-Allow-Origin"] = "*"
    return resp


def register_builds(app: Any) -> None:
    if getattr(app, "_builds_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_builds_bp", bp)
    LOG.debug("builds blueprint registered")


__all__ = ["register_builds", "bp"]
