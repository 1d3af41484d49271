"""Canonical ordering of the glossary source file.

Terms are kept sorted by slug, each term's keys follow the canonical key
order, and redirects are sorted by retired slug. Keeping the source in this
order makes review diffs small and export output stable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from ...entities.core import TERM_KEY_ORDER
from ...utils.helpers import write_text_atomic
from ...utils.logging import get_logger
from ..validation.io import load_glossary

_LOGGER = get_logger(module=__name__)


def _order_term_keys(term: Any) -> Any:
    if not isinstance(term, Mapping):
        return term
    ordered: Dict[str, Any] = {key: term[key] for key in TERM_KEY_ORDER if key in term}
    for key, value in term.items():
        if key not in ordered:
            ordered[key] = value
    return ordered


def _slug_key(term: Any) -> str:
    if isinstance(term, Mapping):
        slug = term.get("slug")
        return slug if isinstance(slug, str) else str(slug or "")
    return ""


def canonicalize_source(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``raw`` with terms, term keys and redirects ordered."""

    terms = raw.get("terms")
    if not isinstance(terms, list):
        raise ValueError("terms must be an array")

    result: Dict[str, Any] = dict(raw)
    result["terms"] = [_order_term_keys(term) for term in sorted(terms, key=_slug_key)]
    redirects = raw.get("redirects")
    if isinstance(redirects, Mapping):
        result["redirects"] = {key: redirects[key] for key in sorted(redirects, key=str)}
    return result


def is_canonical(raw: Mapping[str, Any]) -> bool:
    """Whether ``raw`` is already in canonical order, including key order."""

    canonical = canonicalize_source(raw)
    if [_slug_key(term) for term in canonical["terms"]] != [
        _slug_key(term) for term in raw["terms"]
    ]:
        return False
    for before, after in zip(raw["terms"], canonical["terms"]):
        if isinstance(before, Mapping) and list(before) != list(after):
            return False
    redirects = raw.get("redirects")
    if isinstance(redirects, Mapping) and list(redirects) != list(canonical["redirects"]):
        return False
    return True


def extract_header(text: str) -> str:
    """Return the leading block of ``#`` comment lines, if any."""

    header: List[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            header.append(line)
        elif stripped:
            break
    return "\n".join(header) + "\n" if header else ""


def dump_source(raw: Mapping[str, Any], header: str = "") -> str:
    """Render a glossary document as YAML, preserving a header comment."""

    body = yaml.safe_dump(
        dict(raw),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    )
    return f"{header}{body}"


def sort_glossary_file(path: str | Path, *, check: bool = False) -> bool:
    """Sort a glossary file in place; return True when it was already sorted.

    With ``check`` the file is never written.
    """

    source = Path(path)
    raw = load_glossary(source)
    if not isinstance(raw, Mapping):
        raise ValueError(f"{source} must contain an object with a terms array")

    if is_canonical(raw):
        _LOGGER.info("{path} is already sorted", path=str(source))
        return True
    if check:
        _LOGGER.info("{path} is not sorted", path=str(source))
        return False

    header = extract_header(source.read_text(encoding="utf-8"))
    write_text_atomic(source, dump_source(canonicalize_source(raw), header))
    _LOGGER.info("Sorted {count} terms in {path}", count=len(raw["terms"]), path=str(source))
    return False


__all__ = [
    "canonicalize_source",
    "is_canonical",
    "extract_header",
    "dump_source",
    "sort_glossary_file",
]
