"""Application initialization / wiring.

Orchestrates: DB init, Babel, route registration, template context.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import Flask
from flask_babel import get_locale

from docshost import config
from docshost.db import init_engine_once
from docshost.i18n import DEFAULT_LOCALE, init_babel
from docshost.routes.inject import register_all as register_routes
from docshost.utils.logging import get_logger

LOG = get_logger("docshost.startup")


def _register_template_context(app: Any) -> None:
    if getattr(app, "_docshost_template_context", False):
        return
    meta = config.metadata()

    @app.context_processor
    def _docshost_context():
        locale = get_locale()
        return {
            "app_name": meta["name"],
            "app_version": meta["version"],
            "html_lang": locale.language if locale is not None else DEFAULT_LOCALE,
        }

    setattr(app, "_docshost_template_context", True)


def init_app(app: Any) -> None:
    LOG.debug("init_app starting")
    init_engine_once()
    LOG.debug("DB engine initialized")
    init_babel(app)
    register_routes(app)
    _register_template_context(app)
    LOG.info("App startup wiring complete config=%s", config.summarize_runtime_config())


def create_app(test_config: Optional[dict] = None) -> Flask:
    """Build a configured Flask application."""
    app = Flask("docshost", template_folder="templates")
    app.config["SECRET_KEY"] = config.secret_key()
    if test_config:
        app.config.update(test_config)
    init_app(app)
    return app


__all__ = ["create_app", "init_app"]
