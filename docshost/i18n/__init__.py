"""Flask-Babel setup: locale selection and translation directories."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from flask import has_request_context, request
from flask_babel import Babel, get_babel

from docshost.config import translations_dir
from docshost.utils.logging import get_logger

LOG = get_logger("i18n")

DEFAULT_LOCALE = "en"
SUPPORTED_LANGUAGES = ("en", "de", "fr")

_PACKAGE_ROOT = Path(__file__).resolve().parents[1]
_DEFAULT_TRANSLATION_ROOTS: Sequence[Path] = (_PACKAGE_ROOT / "translations",)

babel = Babel()


def normalize_language_choice(raw: Optional[str]) -> Optional[str]:
    """Map ``de-AT`` / ``fr_CA`` style codes onto a supported language."""
    if not raw or not isinstance(raw, str):
        return None
    code = raw.strip().replace("_", "-").split("-", 1)[0].lower()
    return code if code in SUPPORTED_LANGUAGES else None


def select_locale() -> str:
    if not has_request_context():
        return DEFAULT_LOCALE
    best = request.accept_languages.best_match(SUPPORTED_LANGUAGES)
    return normalize_language_choice(best) or DEFAULT_LOCALE


def _normalize_paths(paths: Iterable[Path | str]) -> List[str]:
    seen: List[str] = []
    for candidate in paths:
        path = Path(candidate).resolve()
        if not path.is_dir():
            LOG.debug("Translation directory missing; skipping: %s", path)
            continue
        as_str = str(path)
        if as_str not in seen:
            seen.append(as_str)
    return seen


def configure_translations(app, extra_roots: Iterable[Path | str] | None = None) -> None:
    """Put first-party translation directories ahead of any already registered."""
    babel_cfg = get_babel(app)
    candidates: List[Path | str] = list(_DEFAULT_TRANSLATION_ROOTS)
    configured = translations_dir()
    if configured:
        candidates.append(configured)
    if extra_roots:
        candidates.extend(extra_roots)

    desired = _normalize_paths(candidates)
    existing = list(getattr(babel_cfg, "translation_directories", []))
    merged: List[str] = list(desired)
    for directory in existing:
        if directory not in merged:
            merged.append(directory)
    if merged == existing or not desired:
        return
    babel_cfg.translation_directories = merged
    app.config["BABEL_TRANSLATION_DIRECTORIES"] = ";".join(merged)
    LOG.info("Registered %s custom translation directories", len(desired))


def init_babel(app) -> None:
    if getattr(app, "_docshost_babel", False):
        return
    app.config.setdefault("BABEL_DEFAULT_LOCALE", DEFAULT_LOCALE)
    babel.init_app(app, locale_selector=select_locale)
    configure_translations(app)
    setattr(app, "_docshost_babel", True)
    LOG.debug("Flask-Babel initialised (default locale %s)", DEFAULT_LOCALE)


__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LANGUAGES",
    "babel",
    "configure_translations",
    "init_babel",
    "normalize_language_choice",
    "select_locale",
]
