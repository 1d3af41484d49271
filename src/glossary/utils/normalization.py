"""Normalization helpers shared by validation, scoring and export.

Two families live here. ``normalize_name`` derives the comparison key used for
duplicate detection across display names and aliases. ``normalize_string``,
``normalize_array`` and ``normalize_term`` canonicalize raw term payloads into
:class:`~glossary.entities.core.TermRecord` values, dropping blank optional
content so that every published record has the same shape.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from glossary.entities.core import (
    DEFINITION_MIN_LENGTH,
    SLUG_MAX_LENGTH,
    SLUG_MIN_LENGTH,
    SLUG_PATTERN,
    TERM_KEY_ORDER,
    ControversyLevel,
    TermRecord,
)

_NON_ASCII_ALNUM = re.compile(r"[^a-z0-9]+")
_SLUG_RE = re.compile(SLUG_PATTERN)

_REQUIRED_FIELDS = ("slug", "term", "definition")
_OPTIONAL_TEXT_FIELDS = ("explanation", "humor")
_OPTIONAL_LIST_FIELDS = ("see_also", "tags", "aliases")
_CONTROVERSY_VALUES = tuple(level.value for level in ControversyLevel)


class TermNormalizationError(ValueError):
    """Raised when a raw term cannot be turned into a valid record."""


def strip_non_ascii_alnum(text: str) -> str:
    """Drop every character outside ``[a-z0-9]``.

    Accented letters are removed outright rather than transliterated, so
    ``"résumé"`` becomes ``"rsum"``. Swap this function to change that policy.
    """

    return _NON_ASCII_ALNUM.sub("", text)


def normalize_name(value: Any) -> str:
    """Return the duplicate-detection key for a display name or alias.

    The steps run in a fixed order: NFC composition, lowercasing, then
    stripping. Composing first makes a base letter plus combining mark behave
    exactly like the precomposed character. Non-string input yields ``""``.
    """

    if not isinstance(value, str):
        return ""
    composed = unicodedata.normalize("NFC", value)
    return strip_non_ascii_alnum(composed.lower())


def normalize_string(value: Any) -> str | None:
    """Return the trimmed string, or ``None`` when absent or blank."""

    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    trimmed = text.strip()
    return trimmed or None


def normalize_array(value: Any) -> List[str] | None:
    """Trim every entry, drop blank ones, and return ``None`` if nothing is left.

    A single scalar is treated as a one-element list.
    """

    if value is None:
        return None
    entries = value if isinstance(value, (list, tuple)) else [value]
    normalized = [text for text in (normalize_string(entry) for entry in entries) if text]
    return normalized or None


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, TermRecord):
        return raw.model_dump(mode="json", exclude_none=True)
    if isinstance(raw, Mapping):
        return raw
    raise TermNormalizationError("Each term must be an object")


def normalize_term(raw: Any) -> TermRecord:
    """Canonicalize a raw term payload into a :class:`TermRecord`.

    Raises:
        TermNormalizationError: when a required field is missing or blank, an
            unknown field is present, or a slug, definition or
            controversy-level constraint is violated.
    """

    payload = _as_mapping(raw)

    unexpected = [key for key in payload if key not in TERM_KEY_ORDER]
    required = {name: normalize_string(payload.get(name)) for name in _REQUIRED_FIELDS}
    missing = [name for name, value in required.items() if value is None]
    label = required["slug"] or required["term"] or "<unknown>"
    if missing:
        raise TermNormalizationError(
            f"Term '{label}' is missing required field(s): {', '.join(missing)}"
        )
    if unexpected:
        raise TermNormalizationError(
            f"Term '{label}' has unexpected field(s): {', '.join(map(str, unexpected))}"
        )

    slug = required["slug"]
    definition = required["definition"]
    if not _SLUG_RE.match(slug):
        raise TermNormalizationError(
            f"Slug '{slug}' must contain only lowercase letters, numbers, and hyphens "
            f"(pattern: {SLUG_PATTERN})"
        )
    if len(slug) < SLUG_MIN_LENGTH:
        raise TermNormalizationError(
            f"Slug '{slug}' must be at least {SLUG_MIN_LENGTH} characters long"
        )
    if len(slug) > SLUG_MAX_LENGTH:
        raise TermNormalizationError(
            f"Slug '{slug}' must be at most {SLUG_MAX_LENGTH} characters long"
        )
    if len(definition) < DEFINITION_MIN_LENGTH:
        raise TermNormalizationError(
            f"Definition for '{slug}' must be at least {DEFINITION_MIN_LENGTH} characters "
            f"long (current: {len(definition)})"
        )

    normalized: Dict[str, Any] = dict(required)
    for name in _OPTIONAL_TEXT_FIELDS:
        text = normalize_string(payload.get(name))
        if text is not None:
            normalized[name] = text
    for name in _OPTIONAL_LIST_FIELDS:
        entries = normalize_array(payload.get(name))
        if entries is not None:
            normalized[name] = entries

    controversy = normalize_string(payload.get("controversy_level"))
    if controversy is not None:
        if controversy not in _CONTROVERSY_VALUES:
            raise TermNormalizationError(
                f"Controversy level '{controversy}' for '{slug}' must be one of: "
                f"{', '.join(_CONTROVERSY_VALUES)}"
            )
        normalized["controversy_level"] = controversy

    try:
        return TermRecord.model_validate(normalized)
    except ValidationError as exc:
        raise TermNormalizationError(f"Term '{slug}' is invalid: {exc}") from exc


__all__ = [
    "TermNormalizationError",
    "strip_non_ascii_alnum",
    "normalize_name",
    "normalize_string",
    "normalize_array",
    "normalize_term",
]
