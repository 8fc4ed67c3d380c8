"""Database layer root."""

from .engine import (
    app_session,
    get_engine,
    get_scoped_session,
    get_session_factory,
    init_engine_once,
)

__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
]
