"""ORM models aggregate exports."""
from .crates import (  # noqa: F401
    Author,
    AuthorRel,
    Base,
    Build,
    CompressionRel,
    Crate,
    DocCoverage,
    File,
    Keyword,
    KeywordRel,
    Release,
    Repository,
)
from .admin import (  # noqa: F401
    BlacklistedCrate,
    ConfigEntry,
    CratePriority,
    SandboxOverride,
)

__all__ = [
    "Base",
    "Crate",
    "Repository",
    "Release",
    "Author",
    "AuthorRel",
    "Keyword",
    "KeywordRel",
    "Build",
    "CompressionRel",
    "DocCoverage",
    "File",
    "BlacklistedCrate",
    "SandboxOverride",
    "CratePriority",
    "ConfigEntry",
]
