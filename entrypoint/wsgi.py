#!/usr/bin/env python3
"""WSGI entrypoint.

Responsibilities:
    1. Build the docshost Flask app once per process (`create_app`).
    2. Expose it as ``application`` for production WSGI servers
       ("gunicorn entrypoint.wsgi:application").
    3. Run Flask's development server when executed directly.
"""

from __future__ import annotations

import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from docshost import config  # noqa: E402
from docshost.startup import create_app  # noqa: E402

_APP_SINGLETON = None  # module-level cache


def main():  # pragma: no cover - thin wrapper
    """Create and return the Flask application (idempotent)."""
    global _APP_SINGLETON
    if _APP_SINGLETON is None:
        _APP_SINGLETON = create_app()
    return _APP_SINGLETON


application = main()


if __name__ == "__main__":  # Development server only (Flask built-in)
    application.run(host=config.server_host(), port=config.server_port(), debug=config.server_debug())
