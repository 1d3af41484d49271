"""I/O helpers for the export stage."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping

from ...utils.helpers import write_text_atomic
from ...utils.logging import get_logger
from ...utils.normalization import normalize_string
from ..validation.io import GlossaryLoadError, load_glossary

_LOGGER = get_logger(module=__name__)


def extract_slugs(raw: Any) -> List[str]:
    """Return the non-blank slugs of a raw document.

    Malformed input yields an empty list and a warning rather than an error,
    because the result only feeds the "export only if new" gate.
    """

    if not isinstance(raw, Mapping) or not isinstance(raw.get("terms"), list):
        _LOGGER.warning("Cannot extract slugs: missing or invalid 'terms' array")
        return []
    slugs: List[str] = []
    for term in raw["terms"]:
        if not isinstance(term, Mapping):
            continue
        slug = normalize_string(term.get("slug"))
        if slug:
            slugs.append(slug)
    return slugs


def load_previous_slugs(path: str | Path | None) -> List[str] | None:
    """Load slugs of the previous glossary revision, or ``None`` if unavailable."""

    if path is None:
        return None
    source = Path(path)
    if not source.exists():
        _LOGGER.info("No previous glossary at {path}", path=str(source))
        return None
    try:
        raw = load_glossary(source)
    except GlossaryLoadError as exc:
        _LOGGER.warning("Failed to parse previous glossary: {error}", error=str(exc))
        return []
    return extract_slugs(raw)


def write_export(path: str | Path, serialized: str) -> Path:
    return write_text_atomic(path, serialized).resolve()


__all__ = ["extract_slugs", "load_previous_slugs", "write_export"]
