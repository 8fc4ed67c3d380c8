"""Map service and storage errors onto HTTP status codes."""
from __future__ import annotations

from typing import Any

from flask import jsonify, request

from docshost.services.crate_details_service import CrateNotFoundError
from docshost.storage import PathNotFoundError, SizeLimitReachedError
from docshost.utils.logging import get_logger

LOG = get_logger("routes.errors")


def _respond(message: str, status: int):
    if request.path.endswith(".json"):
        return jsonify({"error": message}), status
    return message, status, {"Content-Type": "text/plain; charset=utf-8"}


def _not_found(exc: Exception):
    LOG.debug("404 path=%s reason=%s", request.path, exc)
    return _respond("not found", 404)


def _too_large(exc: Exception):
    LOG.info("413 path=%s reason=%s", request.path, exc)
    return _respond("the requested file is too large to be served", 413)


def register_error_handlers(app: Any) -> None:
    if getattr(app, "_docshost_error_handlers", False):
        return
    app.register_error_handler(CrateNotFoundError, _not_found)
    app.register_error_handler(PathNotFoundError, _not_found)
    app.register_error_handler(SizeLimitReachedError, _too_large)
    setattr(app, "_docshost_error_handlers", True)
    LOG.debug("error handlers registered")


__all__ = ["register_error_handlers"]
