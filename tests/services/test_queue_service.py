"""Tests for queue_service build priorities."""
from __future__ import annotations

import pytest

from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.services import queue_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_default_priority_without_patterns():
    assert queue_service.get_crate_priority("anything") == queue_service.DEFAULT_PRIORITY == 0


def test_like_patterns_match_crate_names():
    queue_service.set_crate_priority("docsrs-%", -100)
    queue_service.set_crate_priority("_c_", 20)

    assert queue_service.get_crate_priority("docsrs-database") == -100
    assert queue_service.get_crate_priority("docsrs-") == -100
    assert queue_service.get_crate_priority("rcc") == 20
    assert queue_service.get_crate_priority("rc") == 0
    assert queue_service.get_crate_priority("abcd") == 0
    assert queue_service.get_crate_priority("docsrs") == 0


def test_remove_priority_returns_previous_value():
    queue_service.set_crate_priority("foo", 5)

    assert queue_service.remove_crate_priority("foo") == 5
    assert queue_service.remove_crate_priority("foo") is None
    assert queue_service.get_crate_priority("foo") == 0


def test_set_priority_overwrites_existing_pattern():
    queue_service.set_crate_priority("foo", 5)
    queue_service.set_crate_priority("foo", 7)

    assert queue_service.get_crate_priority("foo") == 7
    assert queue_service.list_priorities() == [("foo", 7)]


def test_patterns_match_case_sensitively():
    queue_service.set_crate_priority("Serde%", 3)

    assert queue_service.get_crate_priority("Serde-json") == 3
    assert queue_service.get_crate_priority("serde-json") == 0
