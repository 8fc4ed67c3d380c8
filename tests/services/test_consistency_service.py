"""Tests for consistency_service.load."""
from __future__ import annotations

import pytest

from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.services import consistency_service
from tests.factories import add_release


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_empty_database():
    assert consistency_service.load() == {}


def test_versions_grouped_in_insertion_order():
    add_release("krate", "0.0.2")
    add_release("krate", "0.0.3")
    add_release("krate2", "0.0.4")
    add_release("krate", "0.0.1")

    data = consistency_service.load()

    assert list(data) == ["krate", "krate2"]
    assert data["krate"] == ["0.0.2", "0.0.3", "0.0.1"]
    assert data["krate2"] == ["0.0.4"]
