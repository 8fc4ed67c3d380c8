"""Database engine & session management.

One engine per process, created lazily and idempotently. Schema creation
is serialized with a POSIX file lock so several gunicorn workers starting
at once do not race on DDL.
"""
from __future__ import annotations

import os
import threading
try:  # POSIX file locking for gunicorn multi-worker safety
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None  # type: ignore
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session as SASession
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from docshost import config as app_config
from docshost.db.models import Base
from docshost.utils.logging import get_logger

_engine: Optional[Engine] = None
_SessionFactory: Optional[Callable[[], SASession]] = None
_scoped: Optional[scoped_session] = None
_LOCK = threading.Lock()

LOG = get_logger("docshost.db")

_MEMORY = ":memory:"


def init_engine_once() -> None:
    global _engine, _SessionFactory, _scoped
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        db_path = app_config.get_db_path()
        LOG.info("Initializing docshost database engine at %s", db_path)
        if db_path == _MEMORY:
            # single shared connection so every session sees the same database
            _engine = create_engine(
                "sqlite://",
                future=True,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(_engine, "connect", _sqlite_pragmas)
            _bind_sessions()
            _safe_create_schema()
            return
        parent_dir = os.path.dirname(os.path.abspath(db_path)) or "."
        os.makedirs(parent_dir, exist_ok=True)
        if not os.access(parent_dir, os.W_OK):
            raise RuntimeError(f"docshost DB directory not writable: {parent_dir}")
        _engine = create_engine(f"sqlite:///{db_path}", future=True)
        event.listen(_engine, "connect", _sqlite_pragmas)
        _bind_sessions()
        lock_path = os.path.join(parent_dir, ".docshost_schema.lock")
        if fcntl is not None:
            with open(lock_path, "w") as lf:
                try:
                    fcntl.flock(lf, fcntl.LOCK_EX)
                    _safe_create_schema()
                finally:
                    fcntl.flock(lf, fcntl.LOCK_UN)
        else:
            _safe_create_schema()
        LOG.debug("docshost schema ready")


def _sqlite_pragmas(dbapi_conn, _record) -> None:
    # crate name patterns and storage prefixes match case-sensitively
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA case_sensitive_like = ON")
    finally:
        cursor.close()


def _bind_sessions() -> None:
    global _SessionFactory, _scoped
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False, class_=SASession)
    _scoped = scoped_session(_SessionFactory)


def _safe_create_schema() -> None:
    """Run metadata.create_all, tolerating the 'already exists' race.

    Parallel worker start can make SQLite raise OperationalError between
    the existence check and the DDL; other errors propagate.
    """
    if _engine is None:
        return
    try:
        Base.metadata.create_all(_engine)
    except OperationalError as e:  # pragma: no cover - concurrency edge
        if "already exists" in str(e).lower():
            LOG.warning("Schema create encountered existing tables (benign race)")
        else:
            raise


def get_engine() -> Engine:
    if _engine is None:
        init_engine_once()
    return _engine  # type: ignore[return-value]


def get_session_factory() -> Callable[[], SASession]:
    if _SessionFactory is None:
        init_engine_once()
    return _SessionFactory  # type: ignore[return-value]


def get_scoped_session() -> scoped_session:
    if _scoped is None:
        init_engine_once()
    if _scoped is None:
        raise RuntimeError("Scoped session could not be initialized.")
    return _scoped


@contextmanager
def app_session() -> Iterator[SASession]:
    scoped = get_scoped_session()
    sess = scoped()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


def reset_for_tests(drop: bool = False) -> None:
    global _engine, _SessionFactory, _scoped
    with _LOCK:
        if _scoped is not None:
            _scoped.remove()
        if _engine is not None:
            if drop:
                try:
                    Base.metadata.drop_all(_engine)
                except Exception:
                    LOG.warning("Failed dropping tables during reset", exc_info=True)
            _engine.dispose()
        _engine = None
        _SessionFactory = None
        _scoped = None


__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "reset_for_tests",
]
