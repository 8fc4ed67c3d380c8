"""Route registration.

Called from startup to register every blueprint, the template helpers and
the error handlers. Each `register_*` is idempotent.
"""
from __future__ import annotations

from typing import Any

from docshost.views.helpers import register_template_helpers

from .builds import register_builds
from .crate_pages import register_crate_pages
from .errors import register_error_handlers
from .health import register_health
from .releases import register_releases
from .rustdoc import register_rustdoc


def register_all(app: Any) -> None:
    register_template_helpers(app)
    register_error_handlers(app)
    register_health(app)
    register_releases(app)
    register_builds(app)
    register_crate_pages(app)
    # catch-all /<name>/<version>/... pages go last
    register_rustdoc(app)


__all__ = ["register_all"]
