"""Utility helpers."""
from .versions import is_prerelease, parse_version, pick_latest, sort_versions_desc, version_sort_key

__all__ = [
    "is_prerelease",
    "parse_version",
    "pick_latest",
    "sort_versions_desc",
    "version_sort_key",
]
