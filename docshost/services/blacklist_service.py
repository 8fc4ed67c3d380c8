"""Crate blacklist: crates on it are never imported or built."""
from __future__ import annotations

from typing import List

from docshost.db.repositories import blacklist_repo
from docshost.utils.logging import get_logger

LOG = get_logger("blacklist_service")


class BlacklistError(RuntimeError):
    """Base error for blacklist changes."""


class CrateAlreadyOnBlacklistError(BlacklistError):
    def __init__(self, name: str):
        super().__init__(f"crate {name} is already on the blacklist")
        self.name = name


class CrateNotOnBlacklistError(BlacklistError):
    def __init__(self, name: str):
        super().__init__(f"crate {name} is not on the blacklist")
        self.name = name


def is_blacklisted(name: str) -> bool:
    return blacklist_repo.exists(name)


def list_crates() -> List[str]:
    """Blacklisted crate names, sorted ascending."""
    return blacklist_repo.list_names()


def add_crate(name: str) -> None:
    if is_blacklisted(name):
        raise CrateAlreadyOnBlacklistError(name)
    blacklist_repo.insert(name)
    LOG.info("Crate added to blacklist name=%s", name)


def remove_crate(name: str) -> None:
    if not is_blacklisted(name):
        raise CrateNotOnBlacklistError(name)
    blacklist_repo.delete(name)
    LOG.info("Crate removed from blacklist name=%s", name)


__all__ = [
    "BlacklistError",
    "CrateAlreadyOnBlacklistError",
    "CrateNotOnBlacklistError",
    "is_blacklisted",
    "list_crates",
    "add_crate",
    "remove_crate",
]
