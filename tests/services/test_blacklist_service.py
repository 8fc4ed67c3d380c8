"""Tests for blacklist_service using in-memory SQLite."""
from __future__ import annotations

import pytest

from docshost.db.engine import init_engine_once, reset_for_tests
from docshost.services import blacklist_service
from docshost.services.blacklist_service import CrateAlreadyOnBlacklistError, CrateNotOnBlacklistError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("DOCSHOST_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_add_list_and_remove():
    assert blacklist_service.list_crates() == []

    blacklist_service.add_crate("zebra")
    blacklist_service.add_crate("alpha")

    assert blacklist_service.list_crates() == ["alpha", "zebra"]
    assert blacklist_service.is_blacklisted("alpha")

    blacklist_service.remove_crate("alpha")

    assert blacklist_service.list_crates() == ["zebra"]
    assert not blacklist_service.is_blacklisted("alpha")


def test_adding_twice_fails():
    blacklist_service.add_crate("foo")

    with pytest.raises(CrateAlreadyOnBlacklistError, match="already on the blacklist"):
        blacklist_service.add_crate("foo")


def test_removing_absent_crate_fails():
    with pytest.raises(CrateNotOnBlacklistError):
        blacklist_service.remove_crate("foo")
