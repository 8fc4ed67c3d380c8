"""Release activity feed."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from docshost.services import release_activity_service
from docshost.utils.logging import get_logger

LOG = get_logger("releases")

bp = Blueprint("releases", __name__)


@bp.route("/releases/activity.json", methods=["GET"])
def release_activity():
    return jsonify(release_activity_service.get_release_activity())


def register_releases(app: Any) -> None:
    if getattr(app, "_releases_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_releases_bp", bp)
    LOG.debug("releases blueprint registered")


__all__ = ["register_releases", "bp"]
