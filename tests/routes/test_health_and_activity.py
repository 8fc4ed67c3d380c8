"""Health probe and release activity endpoint tests."""
from __future__ import annotations

import datetime

import pytest

from docshost.config import APP_VERSION
from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.services import release_activity_service
from docshost.startup import create_app
from tests.factories import add_release

NOW = datetime.datetime(2024, 3, 31, 12, 0)


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    monkeypatch.delenv("DOCSHOST_GLOBAL_ALERT_TEXT", raising=False)
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def client():
    app = create_app({"TESTING": True})
    return app.test_client()


def test_healthz_reports_ok(client):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "db": True, "version": APP_VERSION}


def test_release_activity_empty_before_first_update(client):
    assert client.get("/releases/activity.json").get_json() == {}


def test_release_activity_after_update(client):
    add_release("foo", "1.0.0", release_time=NOW - datetime.timedelta(hours=1))
    add_release("bar", "1.0.0", build_status=False, release_time=NOW - datetime.timedelta(hours=2))
    release_activity_service.update_release_activity(NOW)

    data = client.get("/releases/activity.json").get_json()

    assert set(data) == {"dates", "counts", "failures"}
    assert data["dates"][-1] == "31 Mar"
    assert data["counts"][-1] == 2
    assert data["failures"][-1] == 1


def test_create_app_is_idempotent_about_registration():
    app = create_app({"TESTING": True})

    from docshost.startup import init_app

    init_app(app)

    assert "health" in app.blueprints
    assert "rustdoc" in app.blueprints
