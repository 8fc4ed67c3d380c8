"""ORM models for operator-managed tables (blacklist, overrides, priorities, config)."""
from __future__ import annotations

import json
from typing import Any

from sqlalchemy import BigInteger, Column, Integer, String, Text

from .crates import Base


class BlacklistedCrate(Base):
    __tablename__ = "blacklisted_crates"

    crate_name = Column(String(255), primary_key=True)


class SandboxOverride(Base):
    """Per-crate overrides of the documentation build sandbox limits."""

    __tablename__ = "sandbox_overrides"

    crate_name = Column(String(255), primary_key=True)
    max_memory_bytes = Column(BigInteger, nullable=True)
    timeout_seconds = Column(Integer, nullable=True)
    max_targets = Column(Integer, nullable=True)


class CratePriority(Base):
    """Build queue priority for crate names matching a LIKE pattern."""

    __tablename__ = "crate_priorities"

    pattern = Column(String(255), primary_key=True)
    priority = Column(Integer, nullable=False)


class ConfigEntry(Base):
    __tablename__ = "config"

    name = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)

    def decoded(self) -> Any:
        try:
            return json.loads(self.value)
        except (TypeError, ValueError):
            return None


__all__ = ["BlacklistedCrate", "SandboxOverride", "CratePriority", "ConfigEntry"]
